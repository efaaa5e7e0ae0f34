"""
Secure logging system for the board API
민감한 정보 로깅 방지 및 보안 로깅
"""

import functools
import logging
import re
import json
from typing import Any, Dict
from datetime import datetime


class SecureFormatter(logging.Formatter):
    """민감한 정보를 마스킹하는 로그 포매터"""

    SENSITIVE_PATTERNS = [
        # 패스워드 관련
        (r'(?i)(password|pwd|passwd)["\s]*[:=]["\s]*([^",\s]+)', r'\1": "***"'),
        (r'(?i)(password|pwd|passwd)=([^&\s]+)', r'\1=***'),

        # JWT 토큰
        (r'(?i)(token|jwt)["\s]*[:=]["\s]*([A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)', r'\1": "***"'),
        (r'(?i)bearer\s+([A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)', r'Bearer ***'),

        # 시크릿 키
        (r'(?i)(secret[_-]?key|api[_-]?key)["\s]*[:=]["\s]*([^",\s]+)', r'\1": "***"'),
    ]

    def format(self, record: logging.LogRecord) -> str:
        """로그 레코드를 포맷하고 민감한 정보를 마스킹"""
        formatted = super().format(record)

        for pattern, replacement in self.SENSITIVE_PATTERNS:
            formatted = re.sub(pattern, replacement, formatted)

        return formatted


class SecurityLogger:
    """보안 이벤트 전용 로거"""

    def __init__(self):
        self.logger = logging.getLogger("board.security")
        self.logger.setLevel(logging.INFO)

    def log_invalid_token(self, reason: str, ip: str):
        """유효하지 않은 토큰 접근 기록"""
        event_data = {
            "event_type": "invalid_token",
            "reason": reason,
            "ip": ip,
            "timestamp": datetime.utcnow().isoformat()
        }

        self.logger.warning(f"Invalid token: {json.dumps(event_data)}")

    def log_permission_denied(self, user_id: str, resource: str, action: str):
        """권한 거부 기록"""
        event_data = {
            "event_type": "permission_denied",
            "user_id": user_id,
            "resource": resource,
            "action": action,
            "timestamp": datetime.utcnow().isoformat()
        }

        self.logger.warning(f"Permission denied: {json.dumps(event_data)}")


def sanitize_log_data(data: Any) -> Any:
    """로깅용 데이터 정화"""
    if isinstance(data, dict):
        sanitized: Dict[str, Any] = {}
        for key, value in data.items():
            if any(sensitive in key.lower() for sensitive in [
                'password', 'passwd', 'pwd', 'token', 'secret',
                'authorization', 'credential'
            ]):
                sanitized[key] = "***"
            else:
                sanitized[key] = sanitize_log_data(value)
        return sanitized

    elif isinstance(data, (list, tuple)):
        return [sanitize_log_data(item) for item in data]

    elif isinstance(data, str):
        if re.match(r'^[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+$', data):
            return "***"
        return data

    return data


# 전역 보안 로거 인스턴스
security_logger = SecurityLogger()


def setup_application_logging(level: int = logging.INFO):
    """애플리케이션 로깅 설정"""
    root_logger = logging.getLogger("board")
    root_logger.setLevel(level)

    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            SecureFormatter(
                fmt='%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
            )
        )
        root_logger.addHandler(console_handler)

    # app.* 모듈 로거도 같은 핸들러로 출력
    app_logger = logging.getLogger("app")
    app_logger.setLevel(level)
    for handler in root_logger.handlers:
        if handler not in app_logger.handlers:
            app_logger.addHandler(handler)

    # SQL 쿼리 로그 비활성화
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return root_logger


def log_api_call(func):
    """API 호출 로깅 데코레이터"""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        logger = logging.getLogger("board.api")

        try:
            loggable = {
                key: value for key, value in kwargs.items()
                if isinstance(value, (str, int, float, bool, type(None), dict, list))
            }
            logger.info(f"API call started: {func.__name__} with args: {sanitize_log_data(loggable)}")

            result = await func(*args, **kwargs)

            logger.info(f"API call completed: {func.__name__}")
            return result

        except Exception as e:
            logger.error(f"API call failed: {func.__name__} - {str(e)}")
            raise

    return wrapper
