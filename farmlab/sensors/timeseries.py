"""
Pure functions over sensor reading records.

A record is a dict with a ``timestamp`` (unix seconds) and one key per
metric in ``METRICS``; metrics a station does not report are None.
"""
from datetime import datetime, timezone as dt_timezone

METRICS = (
    'air_temp_c',
    'air_humidity_percent',
    'water_temp_c',
    'water_tds_ppm',
    'gas_ppm',
)

METRIC_LABELS = {
    'air_temp_c': 'Air Temp (°C)',
    'air_humidity_percent': 'Air Humidity (%)',
    'water_temp_c': 'Water Temp (°C)',
    'water_tds_ppm': 'Water TDS (ppm)',
    'gas_ppm': 'Gas (ppm)',
}

WINDOW_DAYS = 3
WINDOW_MINIMUM = 50
WINDOW_LIMIT = 100

HOURLY_TOLERANCE_SECONDS = 7200


def iso_from_timestamp(timestamp):
    return datetime.fromtimestamp(timestamp, tz=dt_timezone.utc).isoformat().replace('+00:00', 'Z')


def select_station_window(recent, older, minimum=WINDOW_MINIMUM, limit=WINDOW_LIMIT):
    """
    Choose the readings shown for a station.

    ``recent`` holds the readings of the last few days in chronological order,
    ``older`` the readings before that window, newest first. With no recent
    readings the newest ``limit`` older ones are used; with fewer than
    ``minimum`` recent readings, older ones are prepended until ``limit``
    readings are shown. The result is always chronological.
    """
    recent = list(recent)
    if not recent:
        return list(reversed(list(older)[:limit]))
    if len(recent) < minimum:
        backfill = list(older)[:max(limit - len(recent), 0)]
        return list(reversed(backfill)) + recent
    return recent


def data_range(readings):
    if not readings:
        return {'from': None, 'to': None, 'count': 0}
    return {
        'from': iso_from_timestamp(readings[0]['timestamp']),
        'to': iso_from_timestamp(readings[-1]['timestamp']),
        'count': len(readings),
    }


def hourly_nearest(readings, now, hours=24, tolerance=HOURLY_TOLERANCE_SECONDS):
    """
    One reading per hourly mark going back ``hours`` hours from ``now``.

    For each mark the closest reading is taken if it lies strictly within
    ``tolerance`` seconds; marks without such a reading are skipped.
    Returned points are chronological and numbered 1..hours by mark.
    """
    hourly = []
    for i in range(hours):
        mark = now - i * 3600
        closest = None
        closest_diff = None
        for reading in readings:
            diff = abs(reading['timestamp'] - mark)
            if closest_diff is None or diff < closest_diff:
                closest = reading
                closest_diff = diff
        if closest is not None and closest_diff < tolerance:
            point = {
                'timestamp': mark,
                'datetime': iso_from_timestamp(mark),
                'hour': hours - i,
            }
            point.update({metric: closest.get(metric) for metric in METRICS})
            hourly.append(point)
    hourly.reverse()
    return hourly


def filter_range(readings, start=None, end=None):
    """Readings with start <= timestamp <= end; open bounds when None"""
    return [
        r for r in readings
        if (start is None or r['timestamp'] >= start) and (end is None or r['timestamp'] <= end)
    ]


def metric_summary(readings, metrics=METRICS):
    """min/max/avg per metric over the readings that report it"""
    summary = {}
    for metric in metrics:
        values = [r[metric] for r in readings if r.get(metric) is not None]
        if values:
            summary[metric] = {
                'min': min(values),
                'max': max(values),
                'avg': round(sum(values) / len(values), 2),
                'count': len(values),
            }
        else:
            summary[metric] = {'min': None, 'max': None, 'avg': None, 'count': 0}
    return summary


def reported_metrics(readings):
    """Metrics that at least one reading carries, in canonical order"""
    return [m for m in METRICS if any(r.get(m) is not None for r in readings)]
