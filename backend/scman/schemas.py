from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Literal
from datetime import date, datetime

Role = Literal["admin", "federado", "cpt", "user"]

# ---- Auth ----

class LoginRequest(BaseModel):
    username: str
    password: str

class LoginUser(BaseModel):
    id: int
    name: str

class LoginResponse(BaseModel):
    token: str
    user: LoginUser

class OkResponse(BaseModel):
    ok: bool = True

# ---- Invites ----

class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    full_name: str = Field(min_length=1)
    role: Role = "user"

class RegisterResponse(BaseModel):
    inviteLink: str

class ActivationCheck(BaseModel):
    valid: bool
    reason: Optional[Literal["no_token", "invalid_token", "used_token", "expired_token"]] = None
    username: Optional[str] = None

class ActivateRequest(BaseModel):
    token: str
    password: str = Field(min_length=1, max_length=256)

class ActivateResponse(BaseModel):
    ok: bool
    error: Optional[str] = None

class EraseTokenRequest(BaseModel):
    token: str

class ActivationLink(BaseModel):
    token: str
    user_id: int
    expires_at: datetime
    used: bool
    username: str
    full_name: str
    role: str
    active: bool

# ---- Users ----

class UserResult(BaseModel):
    id: int
    username: str
    full_name: str
    role: str
    active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ModifyUserRequest(BaseModel):
    id: int
    role: Optional[Role] = None

# ---- Events ----

class EventCreate(BaseModel):
    name: str = Field(min_length=1)
    location: str
    start: date
    end: date
    limit: date  # submission deadline
    maxalt: int = Field(ge=0)  # change limit
    type: int = 0
    description: Optional[str] = None

class EventResult(BaseModel):
    id: int
    name: str
    start: date
    end: date
    location: str
    sub_limit_date: date
    change_limit: int
    type: int
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class EraseEventRequest(BaseModel):
    id: int

# ---- Signatures ----

class SignRequest(BaseModel):
    event_id: int
    status: Literal[0, 1, 2]

class SignResponse(BaseModel):
    ok: bool = True
    limit_reached: bool

class LimitStatus(BaseModel):
    status: bool

class AttendanceResponse(BaseModel):
    not_going: List[str]
    going: List[str]
    maybe: List[str]
    noanswer: List[str]
    own_status: int = Field(alias="self")

    model_config = ConfigDict(populate_by_name=True)

# ---- Notifications ----

class NotificationResult(BaseModel):
    id: int
    message: str
    kind: str
    duration: float
    expires_at: float
