import datetime
import math
import attotime

MJD_TO_JD = 2400000.5e0

mtab = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]

_MJD0 = attotime.attodatetime(1858, 11, 17)


def jday(year, month, day, hour=0, minute=0, second=0e0):
    """Julian date of a (proleptic Gregorian) calendar date, UT.

    Valid for years 1900 to 2100; second may carry a fraction.
    """
    return (
        367.0e0 * year
        - math.floor((7 * (year + math.floor((month + 9) / 12.0))) * 0.25)
        + math.floor(275 * month / 9.0)
        + day
        + 1721013.5e0
        + ((second / 60.0e0 + minute) / 60.0e0 + hour) / 24.0e0
    )


def cal2mjd(t):
    """Transform a calendar date to MJD and seconds of day.

    The input parameter t, can be either
    * a native python datetime instance, or
    * an attodatetime instance

    Timezone-aware datetime instances are converted to UTC first; naive
    ones are taken as UTC.

    Return:
        mjd    -> the (integral) MJD and
        secday -> the (fractional) seconds of day
    """
    if isinstance(t, datetime.datetime) and t.tzinfo is not None:
        t = to_utc(t)
    secday = float(getattr(t, "nanosecond", 0)) * 1e-9
    secday += float(t.hour * 3600) + (
        float(t.minute * 60) + (float(t.second) + float(t.microsecond) * 1e-6)
    )

    yr = int(t.year)
    mn = int(t.month)
    dm = int(t.day)

    if mn < 1 or mn > 12:
        raise ValueError("Invalid month {:} in calendar date".format(mn))
    leap = int((mn == 2) and not (yr % 4) and (yr % 100 or not (yr % 400)))
    if dm < 1 or dm > (mtab[mn - 1] + leap):
        raise ValueError("Invalid day of month {:} in calendar date".format(dm))

    # integer division must truncate towards zero here
    my = int((mn - 14) / 12)
    iypmy = yr + my

    mjd = (
        (1461 * (iypmy + 4800)) // 4
        + (367 * (mn - 2 - 12 * my)) // 12
        - (3 * ((iypmy + 4900) // 100)) // 4
        + dm
        - 2432076
    )

    return mjd, secday


def cal2fmjd(t):
    """Transform a calendar date to MJD and fraction of day.

    Return:
        mjd -> the (integral) MJD + the fraction of day
        The fraction of day is always in range [0, 1)
    """
    mjd, sec = cal2mjd(t)
    return float(mjd) + sec / 86400.0


def cal2jd(t):
    """Julian date of a datetime/attodatetime instance."""
    mjd, sec = cal2mjd(t)
    return (float(mjd) + MJD_TO_JD) + sec / 86400.0


def jd2cal(jd):
    """Julian date to attotime.attodatetime.

    The fraction of day is carried at nanosecond resolution, finer than
    a native datetime can hold.
    """
    mjd = jd - MJD_TO_JD
    days = math.floor(mjd)
    fnsec = (mjd - days) * 86400e9
    return _MJD0 + attotime.attotimedelta(days=days, nanoseconds=fnsec)


def minutes_since(jd, epoch_jd):
    """Minutes elapsed from epoch_jd to jd (negative before the epoch)."""
    return (jd - epoch_jd) * 1440.0e0


def to_utc(dt: datetime.datetime) -> datetime.datetime:
    """Return dt in UTC. Naive datetimes are assumed to already be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def utcnow_jd():
    """Julian date of the current UTC wall-clock time.

    For hosts only; nothing in the sampling code reads the clock.
    """
    return cal2jd(datetime.datetime.now(datetime.timezone.utc))
