"""Request payload models for the jsonsdk endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

TRANSACTION_SEARCH_PREFIX = "transactionSearchRequest."
PASSWORD_CREDENTIALS_TYPE = "com.yodlee.ext.login.PasswordCredentials"


class TransactionSearchOptions(BaseModel):
    container_type: str = Field(default="All", alias="containerType")
    higher_fetch_limit: int = Field(default=500, alias="higherFetchLimit")
    lower_fetch_limit: int = Field(default=1, alias="lowerFetchLimit")
    start_number: int = Field(default=1, alias="startNumber")
    end_number: int = Field(default=5, alias="endNumber")
    currency_code: str = Field(default="USD", alias="currencyCode")
    ignore_user_input: bool = Field(default=True, alias="ignoreUserInput")

    model_config = {"populate_by_name": True, "extra": "forbid"}

    def to_form(self) -> dict[str, str]:
        """Flatten into the dotted form fields executeUserSearchRequest expects."""
        fields = {
            "containerType": self.container_type,
            "higherFetchLimit": str(self.higher_fetch_limit),
            "lowerFetchLimit": str(self.lower_fetch_limit),
            "resultRange.endNumber": str(self.end_number),
            "resultRange.startNumber": str(self.start_number),
            "searchFilter.currencyCode": self.currency_code,
            "ignoreUserInput": "true" if self.ignore_user_input else "false",
        }
        return {TRANSACTION_SEARCH_PREFIX + key: value for key, value in fields.items()}


class SiteLoginFormRequest(BaseModel):
    site_id: str | None = Field(default=None, alias="siteId")

    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}

    def missing_field(self) -> str | None:
        return None if self.site_id else "siteId"


class RegisterUserRequest(BaseModel):
    username: str = ""
    password: str = Field(default="", repr=False)
    email_address: str = Field(default="", alias="emailAddress")

    model_config = {"populate_by_name": True}

    def missing_field(self) -> str | None:
        """First empty required field, in the order the service documents them."""
        if not self.username:
            return "username"
        if not self.password:
            return "password"
        if not self.email_address:
            return "emailAddress"
        return None

    def to_form(self) -> dict[str, str]:
        return {
            "userCredentials.loginName": self.username,
            "userCredentials.password": self.password,
            "userProfile.emailAddress": self.email_address,
            "userCredentials.objectInstanceType": PASSWORD_CREDENTIALS_TYPE,
        }
