"""
API 응답 본문 생성
"""
from typing import Any, Dict

SUCCESS_STATUS = "success"


def success_with_data(message: str, data: Any) -> Dict[str, Any]:
    return {"status": SUCCESS_STATUS, "message": message, "data": data}


def failure(status: str, message: str, data: Any = None) -> Dict[str, Any]:
    return {"status": status, "message": message, "data": data}
