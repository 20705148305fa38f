"""공부 기록 앱 예외 정의"""


class StudyLogError(Exception):
    """앱 공통 예외"""


class ConfigurationError(StudyLogError):
    """웹 앱 URL 미설정 / 배열이 아닌 응답 등 설정 문제"""


class RemoteError(StudyLogError):
    """네트워크(전송) 실패 또는 HTTP 오류"""


class EmptyExportError(StudyLogError):
    """내보낼 데이터가 없음"""
