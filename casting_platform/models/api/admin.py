from typing import Optional

from casting_platform.models.api.base import ApiModel
from casting_platform.models.api.users import UserResponse, WriterProfileResponse


class AutoApprovalRequest(ApiModel):
    # Missing values are a 400 from the service
    auto_approval: Optional[bool] = None


class WriterApprovalRequest(ApiModel):
    is_approved_writer: Optional[bool] = None


class WriterControlResponse(ApiModel):
    user: UserResponse
    writer_profile: WriterProfileResponse
    message: str
