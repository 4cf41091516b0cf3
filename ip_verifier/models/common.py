from pydantic import BaseModel, ConfigDict


class VerifyResult(BaseModel):
    """Outcome of verifying one IP address against an allow-list.

    `ip` is the caller's original string, not the normalized address used for
    the lookup. `allowed` is true only when `country` is an exact member of
    the allow-list.
    """

    model_config = ConfigDict(frozen=True)

    ip: str
    country: str
    allowed: bool
