import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import Boolean, Enum as SAEnum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Priority(enum.Enum):
    LOW = 1
    HIGH = 2
    URGENT = 3


@dataclass
class Team:
    Name: str
    Budget: Decimal


@dataclass
class Person:
    Name: Optional[str]
    Age: int
    Score: Optional[float] = None
    Level: Optional[Priority] = None
    Rank: Priority = Priority.LOW
    Active: bool = True
    Joined: Optional[date] = None
    team: Optional[Team] = None
    boss: Optional["Person"] = None
    _secret: str = ""

    @property
    def DisplayName(self) -> str:
        return f"{self.Name} ({self.Age})"


class Ambiguous:
    code: str
    CODE: str


class Product(BaseModel):
    sku: str
    price: Decimal
    tags: List[str] = []


class Base(DeclarativeBase):
    pass


class Species(enum.Enum):
    CAT = "cat"
    DOG = "dog"


class Owner(Base):
    __tablename__ = "owners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    pets: Mapped[List["Pet"]] = relationship(back_populates="owner")


class Pet(Base):
    __tablename__ = "pets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    nickname: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    age: Mapped[int] = mapped_column(Integer)
    weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2), nullable=True)
    species: Mapped[Species] = mapped_column(SAEnum(Species))
    vaccinated: Mapped[bool] = mapped_column(Boolean, default=False)
    owner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("owners.id"), nullable=True)
    owner: Mapped[Optional[Owner]] = relationship(back_populates="pets")


def people() -> list:
    red = Team(Name="Red", Budget=Decimal("1000.50"))
    blue = Team(Name="Blue", Budget=Decimal("250"))
    return [
        Person(Name="Alice", Age=30, Score=4.5, Level=Priority.HIGH, team=red, Joined=date(2024, 1, 15)),
        Person(Name="Bob", Age=25, Score=None, Level=None, Active=False, team=blue),
        Person(Name="Carol 30", Age=41, Score=3.0, Level=Priority.LOW, team=None),
        Person(Name=None, Age=30, Score=2.0, Level=Priority.URGENT, team=red),
        Person(Name="Dave", Age=25, Score=4.5, Level=Priority.HIGH, team=blue),
    ]
