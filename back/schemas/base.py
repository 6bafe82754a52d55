"""
camelCase JSON을 주고받는 공용 스키마 베이스
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """요청은 camelCase/snake_case 모두 허용, 응답은 camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    message: str
