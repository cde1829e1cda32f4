"""
Stock availability for animal medicine and animal feed.

Each family has its own thresholds: feed keeps a higher reorder level, a
longer expiry warning window and a lower critical threshold than medicine.
"""
from .rounding import round_half_up, percentage

MEDICINE = {
    'name': 'medicine',
    'default_reorder': 10,
    'default_category': 'Uncategorized',
    'expiring_days': 30,
    'critical_factor': 0.5,
    'scores': {'critical': 25, 'low': 50, 'adequate': 75},
    'expired_cap': 10,
    'expiring_cap': 60,
}

FEED = {
    'name': 'feed',
    'default_reorder': 50,
    'default_category': 'General Feed',
    'expiring_days': 60,
    'critical_factor': 0.3,
    'scores': {'critical': 20, 'low': 45, 'adequate': 70},
    'expired_cap': 5,
    'expiring_cap': 50,
}

# Category health is always scored against this reorder level when a row has none
CATEGORY_DEFAULT_REORDER = 10


def days_until(day, today):
    return (day - today).days if day is not None else None


def stock_status(quantity, reorder_level, is_expired, is_expiring_soon):
    if is_expired:
        return 'expired'
    if quantity == 0:
        return 'out-of-stock'
    if quantity < reorder_level * 0.5:
        return 'critical'
    if quantity < reorder_level:
        return 'low'
    if is_expiring_soon:
        return 'expiring-soon'
    return 'good'


def availability_status(score):
    if score >= 80:
        return 'excellent'
    if score >= 60:
        return 'good'
    if score >= 40:
        return 'fair'
    if score >= 20:
        return 'poor'
    return 'critical'


def enrich_item(item, family, today):
    quantity = item.get('quantity') or 0
    unit_price = item.get('unit_price') or 0
    reorder_level = item.get('reorder_level') or family['default_reorder']
    days = days_until(item.get('expiry_date'), today)

    is_expired = days is not None and days < 0
    is_expiring_soon = days is not None and 0 <= days <= family['expiring_days']
    is_low_stock = quantity < reorder_level
    is_critical_stock = quantity < reorder_level * family['critical_factor']

    score = 100
    if is_critical_stock:
        score = family['scores']['critical']
    elif is_low_stock:
        score = family['scores']['low']
    elif quantity < reorder_level * 1.5:
        score = family['scores']['adequate']
    if is_expired:
        score = min(score, family['expired_cap'])
    elif is_expiring_soon:
        score = min(score, family['expiring_cap'])

    return {
        **item,
        'quantity': quantity,
        'unit_price': unit_price,
        'total_value': quantity * unit_price,
        'reorder_level': reorder_level,
        'days_until_expiry': days,
        'is_expired': is_expired,
        'is_expiring_soon': is_expiring_soon,
        'is_low_stock': is_low_stock,
        'is_critical_stock': is_critical_stock,
        'availability_score': score,
        'status': stock_status(quantity, reorder_level, is_expired, is_expiring_soon),
    }


def category_health_score(items, today):
    if not items:
        return 100

    total = 0
    for item in items:
        quantity = item.get('quantity') or 0
        reorder_level = item.get('reorder_level') or CATEGORY_DEFAULT_REORDER

        score = 100
        if quantity == 0:
            score = 0
        elif quantity < reorder_level * 0.5:
            score = 30
        elif quantity < reorder_level:
            score = 60
        elif quantity < reorder_level * 1.5:
            score = 80

        days = days_until(item.get('expiry_date'), today)
        if days is not None:
            if days < 0:
                score = min(score, 10)
            elif days <= 7:
                score = min(score, 40)
            elif days <= 30:
                score = min(score, 70)
        total += score

    return round_half_up(total / len(items))


def group_by(items, key):
    groups = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def analyze_categories(enriched, family, today):
    categories = []
    for name, items in group_by(enriched, lambda i: i.get('category') or family['default_category']).items():
        categories.append({
            'name': name,
            'total_items': len(items),
            'total_quantity': sum(i['quantity'] for i in items),
            'total_value': round_half_up(sum(i['total_value'] for i in items)),
            'low_stock_items': sum(1 for i in items if i['is_low_stock']),
            'expired_items': sum(1 for i in items if i['is_expired']),
            'expiring_soon_items': sum(1 for i in items if i['is_expiring_soon']),
            'health_score': category_health_score(items, today),
            'items': items,
        })
    return categories


def family_metrics(enriched, categories):
    return {
        'total_items': len(enriched),
        'total_value': round_half_up(sum(i['total_value'] for i in enriched)),
        'total_quantity': sum(i['quantity'] for i in enriched),
        'low_stock_count': sum(1 for i in enriched if i['is_low_stock']),
        'critical_stock_count': sum(1 for i in enriched if i['is_critical_stock']),
        'expired_count': sum(1 for i in enriched if i['is_expired']),
        'expiring_soon_count': sum(1 for i in enriched if i['is_expiring_soon']),
        'available_categories': len(categories),
        'average_health_score': round_half_up(
            sum(c['health_score'] for c in categories) / max(len(categories), 1)
        ),
    }


def family_alerts(enriched, label, titles, expired_priority, expiring_priority, expiring_days):
    alerts = []
    critical = [i for i in enriched if i['is_critical_stock']]
    expired = [i for i in enriched if i['is_expired']]
    expiring = [i for i in enriched if i['is_expiring_soon']]

    if critical:
        alerts.append({
            'type': 'critical',
            'title': titles[0],
            'message': f"{len(critical)} {label} items critically low",
            'items': [i.get('name') for i in critical],
            'priority': 'high',
        })
    if expired:
        alerts.append({
            'type': 'danger',
            'title': titles[1],
            'message': f"{len(expired)} {label} items have expired",
            'items': [i.get('name') for i in expired],
            'priority': expired_priority,
        })
    if expiring:
        alerts.append({
            'type': 'warning',
            'title': titles[2],
            'message': f"{len(expiring)} {label} items expire within {expiring_days} days",
            'items': [i.get('name') for i in expiring[:5]],
            'priority': expiring_priority,
        })
    return alerts


def analyze_medicine(medical_stock, medicine_units, today):
    enriched = [enrich_item(item, MEDICINE, today) for item in medical_stock]
    categories = analyze_categories(enriched, MEDICINE, today)
    units_by_category = group_by(medicine_units, lambda u: u.get('category') or 'General')

    return {
        'items': enriched,
        'categories': categories,
        'medicine_units': {
            'by_category': [
                {'name': name, 'count': len(units), 'units': units}
                for name, units in units_by_category.items()
            ],
            'total': len(medicine_units),
        },
        'metrics': family_metrics(enriched, categories),
        'alerts': family_alerts(
            enriched, 'medicine',
            ('Critical Medicine Stock', 'Expired Medicines', 'Medicines Expiring Soon'),
            'high', 'medium', MEDICINE['expiring_days'],
        ),
    }


def analyze_feed(food_stock, today):
    enriched = [enrich_item(item, FEED, today) for item in food_stock]
    categories = analyze_categories(enriched, FEED, today)
    feed_types = group_by(enriched, lambda i: i.get('feed_type') or 'Mixed Feed')

    return {
        'items': enriched,
        'categories': categories,
        'feed_types': [
            {
                'name': name,
                'total_items': len(items),
                'total_quantity': sum(i['quantity'] for i in items),
                'total_value': round_half_up(sum(i['total_value'] for i in items)),
            }
            for name, items in feed_types.items()
        ],
        'metrics': family_metrics(enriched, categories),
        'alerts': family_alerts(
            enriched, 'feed',
            ('Critical Feed Stock', 'Expired Feed', 'Feed Expiring Soon'),
            'medium', 'low', FEED['expiring_days'],
        ),
    }


def overall_insights(medicine, feed):
    insights = []
    total_critical = medicine['metrics']['critical_stock_count'] + feed['metrics']['critical_stock_count']
    total_low = medicine['metrics']['low_stock_count'] + feed['metrics']['low_stock_count']

    if total_critical > 0:
        insights.append({
            'type': 'critical',
            'title': 'Critical Stock Levels',
            'description': f"{total_critical} items are critically low and need immediate attention",
            'recommendation': 'Place emergency orders for critical items',
        })
    if total_low > 5:
        insights.append({
            'type': 'warning',
            'title': 'Multiple Low Stock Items',
            'description': f"{total_low} items are below reorder levels",
            'recommendation': 'Review and place bulk orders to optimize shipping costs',
        })

    medicine_value = medicine['metrics']['total_value']
    total_value = medicine_value + feed['metrics']['total_value']
    if total_value > 0:
        medicine_share = percentage(medicine_value, total_value)
        insights.append({
            'type': 'info',
            'title': 'Inventory Value Distribution',
            'description': f"{medicine_share}% medicine, {100 - medicine_share}% feed",
            'recommendation': 'Monitor value distribution for budget planning',
        })

    for analysis, label in ((medicine, 'Medicine'), (feed, 'Feed')):
        score = analysis['metrics']['average_health_score']
        if score < 70:
            insights.append({
                'type': 'warning',
                'title': f"{label} Inventory Health",
                'description': f"{label} inventory health score is {score}/100",
                'recommendation': f"Focus on restocking {label.lower()} categories",
            })
    return insights


def average_availability(items):
    if not items:
        return 100
    return round_half_up(sum(i['availability_score'] for i in items) / len(items))


def availability(medicine, feed):
    medicine_score = average_availability(medicine['items'])
    feed_score = average_availability(feed['items'])
    overall = round_half_up((medicine_score + feed_score) / 2)

    def family(analysis, score):
        return {
            'score': score,
            'status': availability_status(score),
            'categories': [
                {'name': c['name'], 'score': c['health_score'], 'status': availability_status(c['health_score'])}
                for c in analysis['categories']
            ],
        }

    return {
        'medicine': family(medicine, medicine_score),
        'feed': family(feed, feed_score),
        'overall': {'score': overall, 'status': availability_status(overall)},
    }


def calculate_stock_availability(medical_stock, food_stock, medicine_units, now):
    today = now.date()
    medicine = analyze_medicine(medical_stock, medicine_units, today)
    feed = analyze_feed(food_stock, today)

    return {
        'medicine': medicine,
        'feed': feed,
        'overall': overall_insights(medicine, feed),
        'availability': availability(medicine, feed),
        'summary': {
            'total_medicine_items': len(medical_stock),
            'total_feed_items': len(food_stock),
            'total_medicine_units': len(medicine_units),
            'total_medicine_value': medicine['metrics']['total_value'],
            'total_feed_value': feed['metrics']['total_value'],
            'combined_value': medicine['metrics']['total_value'] + feed['metrics']['total_value'],
        },
        'last_updated': now.isoformat(),
    }
