import re


class SessionId:
    PREFIX = "sess_"
    PATTERN = re.compile(r"^sess_[a-f0-9]{8}$")


class Timing:
    COPY_RESET_SECONDS = 2.0  # "복사됨" 표시 자동 해제


class MediaType:
    FALLBACK = "application/octet-stream"


class Messages:
    """사용자 노출 메시지 (원본 에러 내용은 로그에만 남긴다)"""

    NO_IMAGE = "الرجاء اختيار صورة أولاً."
    EXTRACTION_FAILED = "حدث خطأ أثناء استخراج النص. الرجاء المحاولة مرة أخرى."
    LOADING = "...جاري تحليل الصورة واستخراج النصوص"
    NO_RESULTS = "ستظهر النتائج هنا بعد اختيار صورة وبدء عملية الاستخراج."
