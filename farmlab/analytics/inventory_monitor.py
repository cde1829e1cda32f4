"""
Inventory monitor for the sponsor dashboard.

Reduces suppliers, stock rows, medicine units and the newest invoices into
supplier, product, stock and health statistics plus alerts.
"""
from .rounding import round_half_up, plain_number

ACTIVE_SUPPLIER_DAYS = 90
INACTIVE_SUPPLIER_DAYS = 180
ACTIVE_PRODUCT_DAYS = 30
EXPIRY_WARNING_DAYS = 30

DEFAULT_REORDER = {'medical': 10, 'food': 50}


def days_since(moment, now):
    if moment is None:
        return None
    return (now - moment).days


def days_until(day, today):
    if day is None:
        return None
    return (day - today).days


def reorder_level(item):
    return item.get('reorder_level') or DEFAULT_REORDER.get(item.get('family'), 50)


def line_amount(line):
    return line.get('total_price') or (line.get('quantity') or 0) * (line.get('price') or 0)


def is_low(item):
    return (item.get('quantity') or 0) < reorder_level(item)


def is_expiring(item, today):
    days = days_until(item.get('expiry_date'), today)
    return days is not None and 0 <= days <= EXPIRY_WARNING_DAYS


def diversity_score(suppliers):
    """Herfindahl-Hirschman index turned into a 0-100 diversity score"""
    if not suppliers:
        return 0
    total = sum(s['total_spent'] for s in suppliers)
    if not total:
        return 0
    hhi = sum((s['total_spent'] / total) ** 2 for s in suppliers)
    return round_half_up((1 - hhi) * 100)


def analyze_suppliers(invoices, now):
    metrics = {}
    for invoice in invoices:
        key = invoice.get('supplier_id')
        entry = metrics.get(key)
        if entry is None:
            entry = metrics[key] = {
                'id': key,
                'name': invoice.get('supplier_name') or 'Unknown Supplier',
                'total_spent': 0,
                'invoice_count': 0,
                'last_order': None,
                'products': [],
                'categories': [],
            }
        entry['total_spent'] += invoice.get('grand_total') or 0
        entry['invoice_count'] += 1
        if entry['last_order'] is None or invoice['created_at'] > entry['last_order']:
            entry['last_order'] = invoice['created_at']
        for line in invoice.get('lines', []):
            if line['name'] not in entry['products']:
                entry['products'].append(line['name'])
            if line.get('category') and line['category'] not in entry['categories']:
                entry['categories'].append(line['category'])

    supplier_list = []
    for entry in metrics.values():
        supplier_list.append({
            **entry,
            'product_count': len(entry['products']),
            'category_count': len(entry['categories']),
            'average_order_value': round_half_up(entry['total_spent'] / entry['invoice_count']) if entry['invoice_count'] else 0,
            'days_since_last_order': days_since(entry['last_order'], now),
        })

    active = [
        s for s in supplier_list
        if s['days_since_last_order'] is not None and s['days_since_last_order'] <= ACTIVE_SUPPLIER_DAYS
    ]
    top = sorted(supplier_list, key=lambda s: s['total_spent'], reverse=True)[:10]

    total_spent = sum(s['total_spent'] for s in supplier_list)
    invoice_count = sum(s['invoice_count'] for s in supplier_list)
    concentration = top[0]['total_spent'] / total_spent * 100 if top and total_spent else 0

    return {
        'all': supplier_list,
        'active': active,
        'top': top,
        'metrics': {
            'concentration': round_half_up(concentration),
            'average_order_value': round_half_up(total_spent / max(invoice_count, 1)),
            'diversity_score': diversity_score(supplier_list),
        },
    }


def group_by_category(products):
    categories = {}
    for product in products:
        name = product.get('category') or 'Uncategorized'
        group = categories.setdefault(name, {
            'name': name,
            'products': [],
            'total_spent': 0,
            'total_quantity': 0,
            'count': 0,
        })
        group['products'].append(product)
        group['total_spent'] += product['total_spent']
        group['total_quantity'] += product['total_quantity']
        group['count'] += 1
    return list(categories.values())


def analyze_products(invoices, now):
    usage = {}
    for invoice in invoices:
        for line in invoice.get('lines', []):
            entry = usage.get(line['name'])
            if entry is None:
                entry = usage[line['name']] = {
                    'name': line['name'],
                    'category': line.get('category') or 'Uncategorized',
                    'total_quantity': 0,
                    'total_spent': 0,
                    'order_count': 0,
                    'suppliers': [],
                    'last_purchase': None,
                }
            entry['total_quantity'] += line.get('quantity') or 0
            entry['total_spent'] += line_amount(line)
            entry['order_count'] += 1
            supplier_name = invoice.get('supplier_name')
            if supplier_name and supplier_name not in entry['suppliers']:
                entry['suppliers'].append(supplier_name)
            if entry['last_purchase'] is None or invoice['created_at'] > entry['last_purchase']:
                entry['last_purchase'] = invoice['created_at']

    product_list = []
    for entry in usage.values():
        product_list.append({
            **entry,
            'supplier_count': len(entry['suppliers']),
            'avg_price': round_half_up(entry['total_spent'] / entry['total_quantity']) if entry['total_quantity'] > 0 else 0,
            'days_since_last_purchase': days_since(entry['last_purchase'], now),
        })

    active = [
        p for p in product_list
        if p['days_since_last_purchase'] is not None and p['days_since_last_purchase'] <= ACTIVE_PRODUCT_DAYS
    ]
    return {
        'all': product_list,
        'by_category': group_by_category(product_list),
        'top': {
            'by_spending': sorted(product_list, key=lambda p: p['total_spent'], reverse=True)[:15],
            'by_quantity': sorted(product_list, key=lambda p: p['total_quantity'], reverse=True)[:15],
            'by_frequency': sorted(product_list, key=lambda p: p['order_count'], reverse=True)[:15],
        },
        'metrics': {
            'total_products': len(product_list),
            'active_products': len(active),
            'average_price': round_half_up(sum(p['avg_price'] for p in product_list) / max(len(product_list), 1)),
        },
    }


def stock_family(items, family, today):
    return {
        'items': [
            {
                **item,
                'type': family,
                'value': (item.get('quantity') or 0) * (item.get('unit_price') or 0),
                'low_stock': is_low(item),
                'days_until_expiry': days_until(item.get('expiry_date'), today),
            }
            for item in items
        ],
        'total_value': sum((item.get('quantity') or 0) * (item.get('unit_price') or 0) for item in items),
        'total_quantity': sum(item.get('quantity') or 0 for item in items),
        'low_stock_items': sum(1 for item in items if is_low(item)),
        'expiring_items': sum(1 for item in items if is_expiring(item, today)),
    }


def analyze_stock(medical_stock, food_stock, medicine_units, today):
    medical = stock_family(medical_stock, 'medical', today)
    food = stock_family(food_stock, 'food', today)

    categories = []
    for unit in medicine_units:
        if unit.get('category') and unit['category'] not in categories:
            categories.append(unit['category'])

    total_value = medical['total_value'] + food['total_value']
    return {
        'medical': medical,
        'food': food,
        'medicine_units': {
            'items': [{**unit, 'type': 'medicine-unit'} for unit in medicine_units],
            'total_units': len(medicine_units),
            'categories': categories,
        },
        'combined': {
            'total_value': total_value,
            'total_items': len(medical_stock) + len(food_stock),
            'low_stock_alerts': medical['low_stock_items'] + food['low_stock_items'],
            'expiry_alerts': medical['expiring_items'] + food['expiring_items'],
        },
        'total_value': total_value,
    }


def calculate_inventory_health(medical_stock, food_stock, today):
    """
    Score stock levels and freshness of every stock row.

    Stock is good at 1.5x the reorder level, low at the reorder level and
    critical below it. Rows without an expiry date count as fresh.
    """
    items = list(medical_stock) + list(food_stock)
    total = len(items)
    if total == 0:
        return {
            'overall_score': 100,
            'stock_levels': {'good': 0, 'low': 0, 'critical': 0},
            'expiry': {'fresh': 0, 'expiring_soon': 0, 'expired': 0},
            'recommendations': [],
        }

    good = low = critical = 0
    fresh = expiring_soon = expired = 0
    for item in items:
        quantity = item.get('quantity') or 0
        level = reorder_level(item)
        if quantity >= level * 1.5:
            good += 1
        elif quantity >= level:
            low += 1
        else:
            critical += 1

        days = days_until(item.get('expiry_date'), today)
        if days is None or days > EXPIRY_WARNING_DAYS:
            fresh += 1
        elif days < 0:
            expired += 1
        else:
            expiring_soon += 1

    stock_score = (good * 100 + low * 70 + critical * 30) / total
    expiry_score = (fresh * 100 + expiring_soon * 60) / total

    recommendations = []
    if critical > total * 0.1:
        recommendations.append('Critical: Multiple items below reorder level - immediate restocking required')
    if expiring_soon > 0:
        recommendations.append(f"{expiring_soon} items expiring within 30 days - prioritize usage")
    if expired > 0:
        recommendations.append(f"{expired} expired items - remove from inventory immediately")

    return {
        'overall_score': round_half_up((stock_score + expiry_score) / 2),
        'stock_levels': {'good': good, 'low': low, 'critical': critical},
        'expiry': {'fresh': fresh, 'expiring_soon': expiring_soon, 'expired': expired},
        'recommendations': recommendations,
    }


def recent_activity(invoices, medical_stock, food_stock):
    activities = []
    for invoice in invoices[:10]:
        activities.append({
            'type': 'invoice',
            'title': f"Invoice from {invoice.get('supplier_name') or 'Unknown Supplier'}",
            'description': f"{len(invoice.get('lines', []))} items - ${plain_number(invoice.get('grand_total') or 0)}",
            'date': invoice['created_at'],
            'icon': 'invoice',
        })

    stock = sorted(list(medical_stock) + list(food_stock), key=lambda item: item['created_at'], reverse=True)
    for item in stock[:5]:
        activities.append({
            'type': 'stock',
            'title': f"Stock added: {item.get('name')}",
            'description': f"Quantity: {item.get('quantity') or 0} units",
            'date': item['created_at'],
            'icon': 'medical' if item.get('family') == 'medical' else 'food',
        })

    activities.sort(key=lambda activity: activity['date'], reverse=True)
    return activities[:15]


def generate_alerts(medical_stock, food_stock, supplier_analytics, today):
    alerts = []

    low_medical = [item for item in medical_stock if is_low(item)]
    if low_medical:
        alerts.append({
            'type': 'warning',
            'title': 'Low Medical Stock',
            'message': f"{len(low_medical)} medical items below reorder level",
            'priority': 'high',
            'action': 'Review and reorder medical supplies',
        })

    low_food = [item for item in food_stock if is_low(item)]
    if low_food:
        alerts.append({
            'type': 'warning',
            'title': 'Low Food Stock',
            'message': f"{len(low_food)} food items below reorder level",
            'priority': 'medium',
            'action': 'Review and reorder animal feed',
        })

    expiring_medical = [item for item in medical_stock if is_expiring(item, today)]
    if expiring_medical:
        alerts.append({
            'type': 'info',
            'title': 'Items Expiring Soon',
            'message': f"{len(expiring_medical)} items expire within 30 days",
            'priority': 'medium',
            'action': 'Prioritize usage of expiring items',
        })

    inactive = [
        s for s in supplier_analytics['all']
        if s['days_since_last_order'] is not None and s['days_since_last_order'] > INACTIVE_SUPPLIER_DAYS
    ]
    if inactive:
        alerts.append({
            'type': 'info',
            'title': 'Inactive Suppliers',
            'message': f"{len(inactive)} suppliers haven't been used in 6+ months",
            'priority': 'low',
            'action': 'Review supplier relationships',
        })

    return alerts


def calculate_inventory_analytics(suppliers, products, medical_stock, food_stock,
                                  invoices, medicine_units, now):
    """
    Full inventory monitor payload.

    ``invoices`` are expected newest first; ``now`` is an aware datetime and
    its date is used for expiry calculations.
    """
    today = now.date()
    supplier_analytics = analyze_suppliers(invoices, now)
    stock = analyze_stock(medical_stock, food_stock, medicine_units, today)
    stock_rows = list(medical_stock) + list(food_stock)

    return {
        'summary': {
            'total_suppliers': len(suppliers),
            'active_suppliers': len(supplier_analytics['active']),
            'total_products': len(products),
            'medicine_items': len(medical_stock),
            'food_items': len(food_stock),
            'medicine_units': len(medicine_units),
            'total_invoices': len(invoices),
            'inventory_value': stock['total_value'],
        },
        'suppliers': supplier_analytics,
        'products': analyze_products(invoices, now),
        'stock': stock,
        'health': calculate_inventory_health(medical_stock, food_stock, today),
        'activity': recent_activity(invoices, medical_stock, food_stock),
        'alerts': generate_alerts(medical_stock, food_stock, supplier_analytics, today),
        'timestamps': {
            'last_updated': now.isoformat(),
            'last_invoice': invoices[0]['created_at'] if invoices else None,
            'last_stock_update': max((item['created_at'] for item in stock_rows), default=None),
        },
    }
