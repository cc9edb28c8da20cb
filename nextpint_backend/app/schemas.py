# schemas.py  (beer history, search sessions, profile/settings, prompt templates)

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, confloat, conint


# ===================== Enums =====================

class ImportSource(str, Enum):
    UNTAPPD = "untappd"
    RATEBEER = "ratebeer"
    BEERADVOCATE = "beeradvocate"
    MANUAL = "manual"                # typed in by hand / unknown origin

class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"

class PromptCategory(str, Enum):
    IMPORT = "import"
    SEARCH = "search"
    ANALYSIS = "analysis"
    COMPARISON = "comparison"

class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"

IMPORT_SOURCES = tuple(s.value for s in ImportSource)
SESSION_STATUSES = tuple(s.value for s in SessionStatus)
PROMPT_CATEGORIES = tuple(c.value for c in PromptCategory)
FLAVOR_AXES = ("hoppy", "malty", "bitter", "sweet", "sour", "alcohol")


# ===================== Beer history =====================

class BeerIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    brewery: str
    style: str
    rating: confloat(ge=0, le=5) = 0
    abv: Optional[confloat(ge=0, le=100)] = None
    ibu: Optional[confloat(ge=0)] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    source: ImportSource = ImportSource.MANUAL
    source_id: Optional[str] = None
    checkin_date: Optional[str] = None          # ISO date/datetime
    location: Optional[str] = None
    venue: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

class BeerPatch(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    brewery: Optional[str] = None
    style: Optional[str] = None
    rating: Optional[confloat(ge=0, le=5)] = None
    abv: Optional[confloat(ge=0, le=100)] = None
    ibu: Optional[confloat(ge=0)] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    checkin_date: Optional[str] = None
    venue: Optional[str] = None

class RangeIn(BaseModel):
    min: float
    max: float

class DateRangeIn(BaseModel):
    start: str
    end: str

class BeerFilterIn(BaseModel):
    styles: Optional[List[str]] = None
    breweries: Optional[List[str]] = None
    rating_range: Optional[RangeIn] = None
    date_range: Optional[DateRangeIn] = None
    sources: Optional[List[ImportSource]] = None
    search_text: Optional[str] = None


# ===================== Search sessions =====================

class TastePreferenceIn(BaseModel):
    primary: str
    avoid: List[str] = Field(default_factory=list)
    intensity: conint(ge=1, le=5) = 3

class SessionConstraintsIn(BaseModel):
    model_config = ConfigDict(extra="allow")

    location: Optional[str] = None
    budget: Optional[str] = None
    availability: Optional[str] = None
    occasion: Optional[str] = None
    other: List[str] = Field(default_factory=list)

class TimeFrameIn(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None

class SessionProfileIn(BaseModel):
    session_goal: str
    mood: str
    taste_preference: TastePreferenceIn
    constraints: SessionConstraintsIn = Field(default_factory=SessionConstraintsIn)
    search_keywords: List[str] = Field(default_factory=list)
    time_frame: Optional[TimeFrameIn] = None
    include_sns_history: Optional[bool] = None

class SessionIn(BaseModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    status: SessionStatus = SessionStatus.ACTIVE
    profile: SessionProfileIn
    notes: Optional[str] = None

class SessionPatch(BaseModel):
    name: Optional[str] = None
    status: Optional[SessionStatus] = None
    profile: Optional[SessionProfileIn] = None
    notes: Optional[str] = None

class SessionResultIn(BaseModel):
    prompt_id: str
    ai_service: str
    input: str = ""
    output: str = ""
    satisfaction: conint(ge=1, le=5)
    feedback: Optional[str] = None

class SessionFilterIn(BaseModel):
    status: Optional[List[SessionStatus]] = None
    date_range: Optional[DateRangeIn] = None
    search_text: Optional[str] = None


# ===================== Profile / settings =====================

class FlavorProfileIn(BaseModel):
    # axes left out keep their stored value
    hoppy: Optional[conint(ge=1, le=5)] = None
    malty: Optional[conint(ge=1, le=5)] = None
    bitter: Optional[conint(ge=1, le=5)] = None
    sweet: Optional[conint(ge=1, le=5)] = None
    sour: Optional[conint(ge=1, le=5)] = None
    alcohol: Optional[conint(ge=1, le=5)] = None

class BudgetRangeIn(BaseModel):
    min: Optional[confloat(ge=0)] = None
    max: Optional[confloat(ge=0)] = None
    currency: Optional[str] = None

class PreferencesPatch(BaseModel):
    favorite_styles: Optional[List[str]] = None
    flavor_profile: Optional[FlavorProfileIn] = None
    avoid_list: Optional[List[str]] = None
    preferred_breweries: Optional[List[str]] = None
    budget_range: Optional[BudgetRangeIn] = None
    location_preferences: Optional[List[str]] = None

class CacheSettingsPatch(BaseModel):
    max_cache_size: Optional[conint(gt=0)] = None
    cache_retention_days: Optional[conint(gt=0)] = None

class SettingsPatch(BaseModel):
    onboarding_completed: Optional[bool] = None
    data_backup_enabled: Optional[bool] = None
    analytics_enabled: Optional[bool] = None
    crash_reporting_enabled: Optional[bool] = None
    auto_update_templates: Optional[bool] = None


# ===================== Prompts =====================

class VariableValidationIn(BaseModel):
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

class PromptVariableIn(BaseModel):
    name: str
    type: Literal["string", "number", "boolean", "array"] = "string"
    required: bool = False
    description: str = ""
    placeholder: Optional[str] = None
    default_value: Optional[Any] = None
    validation: Optional[VariableValidationIn] = None

class PromptMetadataIn(BaseModel):
    supported_ai: List[str] = Field(default_factory=lambda: ["chatgpt", "claude", "gemini"])
    estimated_tokens: int = 0
    difficulty: Literal["easy", "medium", "hard"] = "easy"
    tags: List[str] = Field(default_factory=list)
    author: Optional[str] = None
    language: Optional[str] = None

class PromptTemplateIn(BaseModel):
    id: str
    name: str
    description: str = ""
    category: PromptCategory
    version: str = "1.0.0"
    locale: str = "en-US"
    template: str
    variables: List[PromptVariableIn] = Field(default_factory=list)
    examples: List[Dict[str, Any]] = Field(default_factory=list)
    metadata: PromptMetadataIn = Field(default_factory=PromptMetadataIn)

class RenderIn(BaseModel):
    variables: Dict[str, Any] = Field(default_factory=dict)
    ai_service: Optional[str] = None

class ImportTextIn(BaseModel):
    text: str
    apply: bool = False


# ===================== Analytics =====================

class TrackEventIn(BaseModel):
    event: str = Field(min_length=1)
    data: Optional[Any] = None
    session_id: Optional[str] = None
    user_id: Optional[str] = None
