# app/models/domain/projects.py
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from app.core.errors import ValidationError

MAX_KEYWORDS = 5


class ProjectCreate(BaseModel):
    """Body of POST /projects as sent by the onboarding wizard."""
    projectName: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    platforms: List[str] = Field(default_factory=list)
    languages: Optional[List[str]] = None
    countries: Optional[List[str]] = None

    def to_backend_payload(self) -> Dict[str, Any]:
        """Validates the request and returns the body expected by the project backend."""
        name = (self.projectName or "").strip()
        if not name:
            raise ValidationError("Project name is required", field="projectName")

        if not self.keywords:
            raise ValidationError("At least one keyword is required", field="keywords")
        if len(self.keywords) > MAX_KEYWORDS:
            raise ValidationError(f"Maximum {MAX_KEYWORDS} keywords allowed", field="keywords")
        keywords = [k.strip() for k in self.keywords if k and k.strip()][:MAX_KEYWORDS]
        if not keywords:
            raise ValidationError("At least one keyword is required", field="keywords")

        if not self.platforms:
            raise ValidationError("At least one platform must be selected", field="platforms")

        return {
            "project_name": name,
            "keywords": keywords,
            "platforms": self.platforms,
            "languages": self.languages or ["en"],
            "countries": self.countries or ["US"],
        }


class ProjectMentionsRequest(BaseModel):
    """Body of POST /get_mentions."""
    project_id: Optional[Union[str, int]] = None
