"""
業務異常類
用於 Service 層拋出業務異常，由 API 層轉換為 HTTP 響應
"""


class UploadTooLargeError(Exception):
    """上傳文件超過大小限制異常"""
    pass


class TooManyCandidatesError(Exception):
    """批次比對候選圖數量超過上限異常"""
    pass
