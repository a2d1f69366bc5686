from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = ""
    password: str = ""


class PasswordChangeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    oldPassword: str = ""
    newPassword: str = ""
    confirmPassword: str = ""


class LoginResult(BaseModel):
    success: bool
    message: str
