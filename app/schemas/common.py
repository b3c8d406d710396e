"""
공통 Pydantic 스키마

모든 API 스키마는 camelCase JSON 필드명을 사용합니다 (예: finalPrice, cartItems).
Python 코드에서는 snake_case 필드명으로 접근합니다.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase alias를 사용하는 기본 스키마"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    """
    단순 성공/실패 메시지 응답 스키마

    Example:
        {
            "success": true,
            "message": "Product deleted successfully"
        }
    """

    success: bool = Field(True, description="처리 성공 여부")
    message: str = Field(..., description="결과 메시지")
