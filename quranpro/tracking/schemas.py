"""
Request bodies for the tracking endpoints
"""
from datetime import date
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ProgressRequest(_CamelModel):
    surah: int = Field(..., ge=1, le=114)
    ayah: int = Field(..., ge=1)


class HistoryRequest(_CamelModel):
    surah: int = Field(..., ge=1, le=114)
    ayah: int = Field(..., ge=1)
    action_type: Optional[str] = Field(None, alias="actionType")
    duration: int = Field(0, ge=0)


class FavoriteRequest(_CamelModel):
    type: str = Field(..., min_length=1)
    reference_id: Optional[str] = Field(None, alias="referenceId")
    reference_text: Optional[str] = Field(None, alias="referenceText")
    notes: Optional[str] = None


class GoalCreateRequest(_CamelModel):
    goal_type: str = Field(..., alias="goalType", min_length=1)
    target_value: int = Field(..., alias="targetValue", ge=0)
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")


class GoalUpdateRequest(_CamelModel):
    current_value: int = Field(0, alias="currentValue", ge=0)
    is_completed: bool = Field(False, alias="isCompleted")


class SessionStartRequest(_CamelModel):
    device_info: Optional[Dict[str, Any]] = Field(None, alias="deviceInfo")


class SessionEndRequest(_CamelModel):
    verses_read: int = Field(0, alias="versesRead", ge=0)
    hasanat_earned: int = Field(0, alias="hasanatEarned", ge=0)


class StatsIncrementRequest(BaseModel):
    hasanat: int = Field(0, ge=0)
    verses: int = Field(0, ge=0)
    time_seconds: int = Field(0, ge=0, validation_alias=AliasChoices("time", "time_seconds"))
    pages_read: int = Field(0, ge=0, validation_alias=AliasChoices("pages", "pages_read"))
