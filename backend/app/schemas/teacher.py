from pydantic import BaseModel, EmailStr, Field

from app.models.teacher import PreferenceLevel


class PeriodAvailability(BaseModel):
    morning: bool = True
    afternoon: bool = True


class WeeklyAvailability(BaseModel):
    monday: PeriodAvailability = Field(default_factory=PeriodAvailability)
    tuesday: PeriodAvailability = Field(default_factory=PeriodAvailability)
    wednesday: PeriodAvailability = Field(default_factory=lambda: PeriodAvailability(afternoon=False))
    thursday: PeriodAvailability = Field(default_factory=PeriodAvailability)
    friday: PeriodAvailability = Field(default_factory=PeriodAvailability)
    saturday: PeriodAvailability = Field(default_factory=PeriodAvailability)


class PeriodPreference(BaseModel):
    morning: PreferenceLevel = PreferenceLevel.neutral
    afternoon: PreferenceLevel = PreferenceLevel.neutral


class WeeklyPreferences(BaseModel):
    monday: PeriodPreference = Field(default_factory=PeriodPreference)
    tuesday: PeriodPreference = Field(default_factory=PeriodPreference)
    wednesday: PeriodPreference = Field(default_factory=PeriodPreference)
    thursday: PeriodPreference = Field(default_factory=PeriodPreference)
    friday: PeriodPreference = Field(default_factory=PeriodPreference)
    saturday: PeriodPreference = Field(default_factory=PeriodPreference)


class TeacherBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    availability: WeeklyAvailability = Field(default_factory=WeeklyAvailability)
    preferences: WeeklyPreferences = Field(default_factory=WeeklyPreferences)
    max_load_per_week: int = Field(default=20, ge=0, le=80)


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    availability: WeeklyAvailability | None = None
    preferences: WeeklyPreferences | None = None
    max_load_per_week: int | None = Field(default=None, ge=0, le=80)


class TeacherPreferencesUpdate(BaseModel):
    availability: WeeklyAvailability | None = None
    preferences: WeeklyPreferences | None = None


class TeacherPreferencesOut(BaseModel):
    teacher_id: str
    name: str
    availability: WeeklyAvailability
    preferences: WeeklyPreferences


class TeacherOut(TeacherBase):
    id: str

    model_config = {"from_attributes": True}
