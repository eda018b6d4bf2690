"""Tiffin report use cases"""
from .get_daily_tiffin_count import GetDailyTiffinCount
from .get_monthly_tiffin_list import GetMonthlyTiffinList
from .dtos import DailyTiffinCountDTO, MonthlyTiffinListDTO, MonthlyOrderDTO, RosterEntryDTO

__all__ = [
    "GetDailyTiffinCount",
    "GetMonthlyTiffinList",
    "DailyTiffinCountDTO",
    "MonthlyTiffinListDTO",
    "MonthlyOrderDTO",
    "RosterEntryDTO",
]
