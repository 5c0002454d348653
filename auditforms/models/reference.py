"""
Reference data read from the organisation spreadsheet
"""
from pydantic import BaseModel, Field
from typing import List, Optional


class Employee(BaseModel):
    id: Optional[str] = None
    name: str


class Store(BaseModel):
    id: Optional[str] = None
    name: str
    location: Optional[str] = None
    region: Optional[str] = None
    manager: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.location:
            return f"{self.name} - {self.location}"
        return self.name


class ReferenceData(BaseModel):
    employees: List[Employee] = Field(default_factory=list)
    stores: List[Store] = Field(default_factory=list)
