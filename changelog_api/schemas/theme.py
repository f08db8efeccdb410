from typing import List, Optional
from pydantic import BaseModel, Field


class ThemeCategory(BaseModel):
    """Category declared by a theme manifest"""
    id: str
    label: str = ""
    description: str = ""
    order: int = 0
    multiple: bool = Field(True, description="Whether several statuses may map to this category")


class ThemeManifest(BaseModel):
    """Structure of a theme's theme.json"""
    id: str = ""
    name: str = ""
    version: str = ""
    description: Optional[str] = None
    author: Optional[str] = None
    categories: List[ThemeCategory] = []

    def get_category(self, category_id: str) -> Optional[ThemeCategory]:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None


class ThemeManifestResponse(BaseModel):
    success: bool = True
    manifest: Optional[ThemeManifest] = None
