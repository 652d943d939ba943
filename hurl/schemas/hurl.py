"""
Pydantic schemas for running and revisiting hurls.

The inbound parameter set mirrors the hurl form: header and post fields
arrive as parallel key/value arrays that may be missing, scalar, or of
unequal length. Normalization happens in the request builder, so the
stored hurl keeps exactly what the caller sent.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# A form array as submitted: absent, a single value, or a list
FormArray = Union[list[Optional[str]], str, None]


class HurlParams(BaseModel):
    """Flat parameter set accepted by ``POST /``."""
    url: str | None = None
    method: str | None = None
    auth: str | None = None
    username: str | None = None
    password: str | None = None
    follow_redirects: bool = False
    header_keys: FormArray = Field(default=None, alias="header-keys")
    header_vals: FormArray = Field(default=None, alias="header-vals")
    param_keys: FormArray = Field(default=None, alias="param-keys")
    param_vals: FormArray = Field(default=None, alias="param-vals")
    post_body: str | None = Field(default=None, alias="post-body")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("follow_redirects", mode="before")
    @classmethod
    def _absent_means_off(cls, value: Any) -> Any:
        return False if value is None else value

    def to_record(self) -> dict[str, Any]:
        """Dump in declaration order, with the form's dashed names."""
        return self.model_dump(by_alias=True)


class HurlResult(BaseModel):
    """Payload returned by a successful hurl."""
    header: str
    body: str
    request: str
    hurl_id: str
    prev_hurl: str | None = None
    view_id: str


class HurlErrorResponse(BaseModel):
    """Payload returned when a hurl fails."""
    error: str


class ViewRecord(BaseModel):
    """The rendered text produced by one execution."""
    header: str
    body: str
    request: str


class HurlDetail(BaseModel):
    """A stored hurl together with its rendered view."""
    hurl: dict[str, Any]
    view: ViewRecord | None = None
    view_id: str | None = None


class HurlListResponse(BaseModel):
    """The hurls made in the current session, newest first."""
    items: list[dict[str, Any]]
    total: int
