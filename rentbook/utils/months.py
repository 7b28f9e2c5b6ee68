from datetime import date, datetime

from dateutil.relativedelta import relativedelta


def month_start(month: str) -> date:
    year, month_num = map(int, month.split("-"))
    return date(year, month_num, 1)


def month_end(month: str) -> date:
    """Last calendar day of a YYYY-MM period."""
    return month_start(month) + relativedelta(months=1, days=-1)


def month_label(month: str) -> str:
    return month_start(month).strftime("%B %Y")


def month_key(d) -> str:
    if isinstance(d, datetime):
        d = d.date()
    return d.strftime("%Y-%m")


def current_month(today=None) -> str:
    return month_key(today or date.today())


def year_months(year: int) -> list:
    return [f"{year:04d}-{m:02d}" for m in range(1, 13)]
