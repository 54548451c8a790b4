"""
Shared Pydantic types for schema validation.

ApiModel: base for every request/response schema. Python attributes are
snake_case, the wire format is camelCase (``nombre_empresa`` <->
``nombreEmpresa``); both spellings are accepted on input.

The admin forms submit ``""`` for untouched optional inputs, so the optional
URL/e-mail types below treat blank strings as missing values.
"""

from typing import Annotated, Any, List, Optional
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, HttpUrl, TypeAdapter
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


_http_url = TypeAdapter(HttpUrl)


def _check_url(value: Optional[str]) -> Optional[str]:
    # Validate but keep the caller's spelling (HttpUrl would append "/")
    if value is not None:
        _http_url.validate_python(value)
    return value


def _unique_ids(value: List[int]) -> List[int]:
    """Collapse repeated ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for item in value:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


OptionalUrl = Annotated[Optional[str], BeforeValidator(_blank_to_none), AfterValidator(_check_url)]
OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(_blank_to_none)]
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
IdList = Annotated[List[int], AfterValidator(_unique_ids)]
