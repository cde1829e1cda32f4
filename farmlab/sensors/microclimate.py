"""
Greenhouse microclimate indicators from inside/outside temperature and humidity.

Temperatures are in °C, relative humidity in percent, vapor pressures in kPa
and absolute humidity in g/m³.
"""
import math

from farmlab.analytics.rounding import round_half_up

MAGNUS_A = 17.27
MAGNUS_B = 237.7

HEATING_BASE_C = 18
COOLING_BASE_C = 24

VPD_TOO_LOW = 0.4
VPD_TOO_HIGH = 1.5

# No history is available for a real estimate yet
THERMAL_STABILITY = 0.8


def dew_point(temperature, humidity):
    alpha = (MAGNUS_A * temperature) / (MAGNUS_B + temperature) + math.log(humidity / 100)
    return (MAGNUS_B * alpha) / (MAGNUS_A - alpha)


def saturation_vapor_pressure(temperature):
    return 0.6108 * math.exp((17.27 * temperature) / (temperature + 237.3))


def actual_vapor_pressure(temperature, humidity):
    return (humidity / 100) * saturation_vapor_pressure(temperature)


def absolute_humidity(vapor_pressure, temperature):
    return 216.7 * (vapor_pressure * 10) / (temperature + 273.15)


def vapor_pressure_deficit(temperature, humidity):
    return saturation_vapor_pressure(temperature) - actual_vapor_pressure(temperature, humidity)


def temperature_humidity_index(temperature, humidity):
    return temperature - (0.55 - 0.0055 * humidity) * (temperature - 14.5)


def crop_vpd_status(vpd):
    if vpd < VPD_TOO_LOW:
        return 'too low'
    if vpd > VPD_TOO_HIGH:
        return 'too high'
    return 'optimal'


def insulation_performance(delta_t):
    delta = abs(delta_t)
    if delta >= 5:
        return 'good'
    if delta >= 2:
        return 'moderate'
    return 'poor'


def ventilation_efficiency(delta_humidity, delta_t):
    if abs(delta_humidity) >= 15 and abs(delta_t) <= 5:
        return 'good'
    if abs(delta_humidity) >= 10:
        return 'moderate'
    return 'poor'


def compute_microclimate_metrics(ti, hi, to, ho):
    """All indicators for one inside/outside pair of readings"""
    delta_t = ti - to
    heating_degree_hours = HEATING_BASE_C - ti if ti < HEATING_BASE_C else 0
    cooling_degree_hours = ti - COOLING_BASE_C if ti > COOLING_BASE_C else 0

    dew_inside = dew_point(ti, hi)
    dew_outside = dew_point(to, ho)
    vp_inside = actual_vapor_pressure(ti, hi)
    vp_outside = actual_vapor_pressure(to, ho)
    vpd = vapor_pressure_deficit(ti, hi)
    humidity_gradient = hi - ho

    return {
        'delta_t': round_half_up(delta_t, 2),
        'thermal_stability': THERMAL_STABILITY,
        'thermal_lag': None,
        'heating_degree_hours': round_half_up(heating_degree_hours, 2),
        'cooling_degree_hours': round_half_up(cooling_degree_hours, 2),
        'dew_point_inside': round_half_up(dew_inside, 2),
        'dew_point_outside': round_half_up(dew_outside, 2),
        'absolute_humidity_inside': round_half_up(absolute_humidity(vp_inside, ti), 2),
        'absolute_humidity_outside': round_half_up(absolute_humidity(vp_outside, to), 2),
        'vapor_pressure_inside': round_half_up(vp_inside, 3),
        'vapor_pressure_outside': round_half_up(vp_outside, 3),
        'vapor_pressure_deficit': round_half_up(vpd, 3),
        'humidity_gradient': round_half_up(humidity_gradient, 2),
        'condensation_risk': ti <= dew_inside,
        'temperature_humidity_index': round_half_up(temperature_humidity_index(ti, hi), 2),
        'crop_vpd_status': crop_vpd_status(vpd),
        'insulation_performance': insulation_performance(delta_t),
        'ventilation_efficiency': ventilation_efficiency(humidity_gradient, delta_t),
    }
