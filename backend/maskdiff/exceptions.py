"""
遮罩比對異常類
核心層只拋出異常，由呼叫端（API 層 / CLI）決定如何回報
"""


class MaskDiffError(Exception):
    """遮罩比對基礎異常"""
    pass


class ImageDecodeError(MaskDiffError):
    """無法解碼圖像異常（來源不存在、格式無法辨識、資料毀損）"""
    pass


class InvalidDimensionError(MaskDiffError):
    """無效的遮罩尺寸異常（來源寬或高為 0、目標尺寸為負數）"""
    pass


class DegenerateComparisonError(MaskDiffError):
    """兩個遮罩的外框面積皆為 0，相似度無定義"""
    pass
