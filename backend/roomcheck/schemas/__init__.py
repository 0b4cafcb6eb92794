"""Pydantic schemas for RoomCheck API."""

from roomcheck.schemas.base import *
from roomcheck.schemas.auth import *
from roomcheck.schemas.home import *
from roomcheck.schemas.room import *
from roomcheck.schemas.inspection import *
from roomcheck.schemas.walkthrough import *
