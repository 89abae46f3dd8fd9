"""Error kinds surfaced by the analysis and report pipeline.

Each error carries a fixed, user-facing message and an HTTP status. The
underlying cause is chained (``raise ... from exc``) and logged, never shown
to the caller unless debug mode is on.
"""


class DreamServiceError(Exception):
    status_code = 500
    message = "服务暂时不可用，请稍后重试"

    def __init__(self, detail: str | None = None, *, message: str | None = None):
        super().__init__(detail or self.message)
        self.detail = detail
        if message:
            self.message = message


class InvalidInput(DreamServiceError):
    status_code = 400
    message = "请提供梦境描述和解读流派"


class AnalysisFailure(DreamServiceError):
    status_code = 502
    message = "梦境解析失败，请稍后重试"

    def __init__(self, reason: str, detail: str | None = None):
        super().__init__(detail or reason)
        self.reason = reason
        if reason == "timeout":
            self.status_code = 504
        elif reason == "not_configured":
            self.status_code = 503


class ReportFailure(DreamServiceError):
    status_code = 500
    message = "报告生成失败，请稍后重试"
