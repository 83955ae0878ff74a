from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from learnify.common.schemas import APIModel

# ==================== REQUEST SCHEMAS ====================

class ResearchPostCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    summary: str = ""
    body: str = ""
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    link: str = ""
    image: str = ""
    is_collaboration: Optional[bool] = Field(None, alias="isCollaboration")
    author_role: str = Field("", alias="authorRole")

# ==================== RESPONSE SCHEMAS ====================

class ResearchAuthor(APIModel):
    name: str
    role: str


class ResearchStats(APIModel):
    likes: int = 0
    comments: int = 0
    collaborations: int = 0


class ResearchPostResponse(APIModel):
    id: str
    title: str
    summary: str
    category: str
    tags: List[str] = []
    author: ResearchAuthor
    timestamp: str
    created_at: str
    image: Optional[str] = None
    link: Optional[str] = None
    stats: ResearchStats
    is_collaboration: bool = False
    is_mine: bool = False
    trending: bool = False


class ResearchFeed(APIModel):
    items: List[ResearchPostResponse] = []
