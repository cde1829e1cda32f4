"""
Spending analytics over supplier invoices.

Invoices are bucketed by their ``invoice_date``. All monetary outputs are
rounded to whole units.
"""
import math

from .periods import month_key, quarter_key, sunday_weekday, week_key
from .rounding import round_half_up, percentage

DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']

SIZE_RANGES = [
    ('Small (< $100)', 0, 100),
    ('Medium ($100 - $500)', 100, 500),
    ('Large ($500 - $1000)', 500, 1000),
    ('Extra Large ($1000+)', 1000, math.inf),
]


def line_amount(line):
    return line.get('total_price') or (line.get('quantity') or 0) * (line.get('price') or 0)


def item_count(invoice):
    return sum(line.get('quantity') or 0 for line in invoice.get('lines', []))


def time_based_spending(invoices):
    daily, monthly, quarterly = {}, {}, {}
    for invoice in invoices:
        day = invoice['invoice_date']
        amount = invoice.get('grand_total') or 0
        daily[day.isoformat()] = daily.get(day.isoformat(), 0) + amount
        monthly[month_key(day)] = monthly.get(month_key(day), 0) + amount
        quarterly[quarter_key(day)] = quarterly.get(quarter_key(day), 0) + amount

    return {
        'daily': [{'date': k, 'amount': round_half_up(v)} for k, v in sorted(daily.items())],
        'monthly': [{'period': k, 'amount': round_half_up(v)} for k, v in sorted(monthly.items())],
        'quarterly': [{'period': k, 'amount': round_half_up(v)} for k, v in sorted(quarterly.items())],
    }


def monthly_trends(invoices):
    months = {}
    for invoice in invoices:
        data = months.setdefault(month_key(invoice['invoice_date']), {'amount': 0, 'count': 0, 'items': 0})
        data['amount'] += invoice.get('grand_total') or 0
        data['count'] += 1
        data['items'] += item_count(invoice)

    return [
        {
            'period': period,
            'amount': round_half_up(data['amount']),
            'invoice_count': data['count'],
            'item_count': data['items'],
            'average_invoice_value': round_half_up(data['amount'] / data['count']),
        }
        for period, data in sorted(months.items())
    ]


def weekly_trends(invoices, weeks=12):
    buckets = {}
    for invoice in invoices:
        data = buckets.setdefault(week_key(invoice['invoice_date']), {'amount': 0, 'count': 0})
        data['amount'] += invoice.get('grand_total') or 0
        data['count'] += 1

    trends = [
        {'period': period, 'amount': round_half_up(data['amount']), 'invoice_count': data['count']}
        for period, data in sorted(buckets.items())
    ]
    return trends[-weeks:]


def supplier_efficiency(average_invoice_value):
    if average_invoice_value > 1000:
        return 'High'
    if average_invoice_value > 500:
        return 'Medium'
    return 'Low'


def supplier_reliability(invoice_count):
    if invoice_count > 10:
        return 'High'
    if invoice_count > 5:
        return 'Medium'
    return 'Low'


def supplier_analysis(invoices):
    spending = {}
    for invoice in invoices:
        data = spending.setdefault(invoice.get('supplier_id'), {
            'name': invoice.get('supplier_name') or 'Unknown Supplier',
            'amount': 0,
            'count': 0,
            'items': 0,
        })
        data['amount'] += invoice.get('grand_total') or 0
        data['count'] += 1
        data['items'] += item_count(invoice)

    analysis = sorted(
        (
            {
                'supplier_id': supplier_id,
                'supplier_name': data['name'],
                'total_spent': round_half_up(data['amount']),
                'invoice_count': data['count'],
                'item_count': data['items'],
                'average_invoice_value': round_half_up(data['amount'] / data['count']),
            }
            for supplier_id, data in spending.items()
        ),
        key=lambda s: s['total_spent'],
        reverse=True,
    )
    total = sum(s['total_spent'] for s in analysis)
    for supplier in analysis:
        supplier['percentage'] = percentage(supplier['total_spent'], total)

    performance = [
        {
            **supplier,
            'efficiency': supplier_efficiency(supplier['average_invoice_value']),
            'reliability': supplier_reliability(supplier['invoice_count']),
        }
        for supplier in analysis
    ]
    return {
        'analysis': analysis,
        'performance': performance,
        'distribution': analysis[:10],
    }


def category_analysis(invoices):
    spending = {}
    monthly = {}
    for invoice in invoices:
        month = month_key(invoice['invoice_date'])
        for line in invoice.get('lines', []):
            category = line.get('category') or 'Uncategorized'
            amount = line_amount(line)
            data = spending.setdefault(category, {'amount': 0, 'count': 0, 'items': 0})
            data['amount'] += amount
            data['count'] += 1
            data['items'] += line.get('quantity') or 0
            by_month = monthly.setdefault(category, {})
            by_month[month] = by_month.get(month, 0) + amount

    total = sum(data['amount'] for data in spending.values())
    breakdown = sorted(
        (
            {
                'category': category,
                'total_spent': round_half_up(data['amount']),
                'item_count': data['items'],
                'purchase_count': data['count'],
                'percentage': percentage(data['amount'], total),
                'average_item_value': round_half_up(data['amount'] / data['items']) if data['items'] > 0 else 0,
            }
            for category, data in spending.items()
        ),
        key=lambda c: c['total_spent'],
        reverse=True,
    )
    trends = [
        {
            'category': category,
            'monthly_data': [
                {'month': month, 'amount': round_half_up(amount)}
                for month, amount in sorted(by_month.items())
            ],
        }
        for category, by_month in monthly.items()
    ]
    return {'breakdown': breakdown, 'trends': trends}


def product_analysis(invoices):
    products = {}
    categories = {}
    for invoice in invoices:
        for line in invoice.get('lines', []):
            amount = line_amount(line)
            data = products.setdefault(line['name'], {'amount': 0, 'quantity': 0, 'count': 0})
            data['amount'] += amount
            data['quantity'] += line.get('quantity') or 0
            data['count'] += 1
            category = line.get('category') or 'Uncategorized'
            categories[category] = categories.get(category, 0) + amount

    for data in products.values():
        data['avg_price'] = round_half_up(data['amount'] / data['quantity']) if data['quantity'] > 0 else 0

    top_products = sorted(
        (
            {
                'product_name': name,
                'total_spent': round_half_up(data['amount']),
                'total_quantity': data['quantity'],
                'purchase_count': data['count'],
                'average_price': data['avg_price'],
            }
            for name, data in products.items()
        ),
        key=lambda p: p['total_spent'],
        reverse=True,
    )[:20]

    category_total = sum(categories.values())
    distribution = sorted(
        (
            {'category': category, 'amount': round_half_up(amount), 'percentage': percentage(amount, category_total)}
            for category, amount in categories.items()
        ),
        key=lambda c: c['amount'],
        reverse=True,
    )

    prices = sorted(data['avg_price'] for data in products.values() if data['avg_price'] > 0)
    price_analysis = {
        'average_price': round_half_up(sum(prices) / len(prices)) if prices else 0,
        'median_price': prices[len(prices) // 2] if prices else 0,
        'price_range': {
            'min': prices[0] if prices else 0,
            'max': prices[-1] if prices else 0,
        },
    }
    return {
        'top_products': top_products,
        'category_distribution': distribution,
        'price_analysis': price_analysis,
    }


def spending_patterns(invoices):
    by_day = {}
    sizes = [{'label': label, 'min': low, 'max': high, 'count': 0, 'amount': 0} for label, low, high in SIZE_RANGES]

    for invoice in invoices:
        amount = invoice.get('grand_total') or 0
        day_name = DAY_NAMES[sunday_weekday(invoice['invoice_date'])]
        by_day[day_name] = by_day.get(day_name, 0) + amount
        for size in sizes:
            if size['min'] <= amount < size['max']:
                size['count'] += 1
                size['amount'] += amount
                break

    return {
        'day_of_week': [{'day': day, 'amount': round_half_up(amount)} for day, amount in by_day.items()],
        'size_distribution': [
            {
                'label': size['label'],
                'min': size['min'],
                # JSON has no infinity
                'max': None if size['max'] == math.inf else size['max'],
                'count': size['count'],
                'amount': round_half_up(size['amount']),
                'average_value': round_half_up(size['amount'] / size['count']) if size['count'] > 0 else 0,
            }
            for size in sizes
        ],
    }


def growth(current, previous):
    if previous > 0:
        return round_half_up((current - previous) / previous * 100)
    return 0


def growth_analysis(months):
    """Growth of the latest month, quarter and year over the preceding one"""
    if len(months) < 2:
        return {'month_over_month': 0, 'quarter_over_quarter': 0, 'year_over_year': 0}

    amounts = [m['amount'] for m in months]
    month_over_month = growth(amounts[-1], amounts[-2])
    quarter_over_quarter = growth(sum(amounts[-3:]), sum(amounts[-6:-3])) if len(amounts) >= 6 else 0
    year_over_year = growth(sum(amounts[-12:]), sum(amounts[-24:-12])) if len(amounts) >= 12 else 0

    if month_over_month > 0:
        trend = 'increasing'
    elif month_over_month < 0:
        trend = 'decreasing'
    else:
        trend = 'stable'

    return {
        'month_over_month': month_over_month,
        'quarter_over_quarter': quarter_over_quarter,
        'year_over_year': year_over_year,
        'trend': trend,
    }


def financial_insights(suppliers, categories, months, growth_data):
    insights = []

    top_supplier = suppliers['analysis'][0]['percentage'] if suppliers['analysis'] else 0
    if top_supplier > 50:
        insights.append({
            'type': 'risk',
            'title': 'High Supplier Concentration',
            'description': f"{top_supplier}% of spending is with one supplier. Consider diversifying to reduce risk.",
            'impact': 'medium',
            'recommendation': 'Diversify supplier base to reduce dependency risk',
        })

    if growth_data['month_over_month'] > 20:
        insights.append({
            'type': 'growth',
            'title': 'Rapid Spending Increase',
            'description': f"Spending increased by {growth_data['month_over_month']}% this month. Monitor for budget alignment.",
            'impact': 'high',
            'recommendation': 'Review budget allocation and spending controls',
        })

    if categories['breakdown'] and categories['breakdown'][0]['percentage'] > 70:
        top = categories['breakdown'][0]
        insights.append({
            'type': 'opportunity',
            'title': 'Category Concentration',
            'description': f"{top['percentage']}% of spending is in {top['category']}. Optimize this category for maximum impact.",
            'impact': 'medium',
            'recommendation': 'Focus optimization efforts on dominant spending category',
        })

    if len(months) >= 2 and months[-1]['average_invoice_value'] > months[-2]['average_invoice_value']:
        insights.append({
            'type': 'trend',
            'title': 'Increasing Invoice Values',
            'description': 'Average invoice value is trending upward. This may indicate bulk purchasing or price increases.',
            'impact': 'low',
            'recommendation': 'Analyze if this represents better bulk pricing or cost inflation',
        })

    return insights


def calculate_invoice_analytics(invoices):
    """Summary, spending, supplier, category and product analytics for invoices"""
    total_invoices = len(invoices)
    if total_invoices == 0:
        return {
            'total_invoices': 0,
            'summary': {},
            'spending': {},
            'trends': {},
            'suppliers': {},
            'insights': [],
        }

    totals = [invoice.get('grand_total') or 0 for invoice in invoices]
    total_amount = sum(totals)
    total_quantity = sum(item_count(invoice) for invoice in invoices)
    unique_products = {line['name'] for invoice in invoices for line in invoice.get('lines', [])}

    months = monthly_trends(invoices)
    growth_data = growth_analysis(months)
    suppliers = supplier_analysis(invoices)
    categories = category_analysis(invoices)

    return {
        'total_invoices': total_invoices,
        'summary': {
            'total_amount': round_half_up(total_amount),
            'average_invoice_value': round_half_up(total_amount / total_invoices),
            'largest_invoice': round_half_up(max(totals)),
            'smallest_invoice': round_half_up(min(totals)),
            'average_items_per_invoice': round_half_up(total_quantity / total_invoices),
            'total_unique_products': len(unique_products),
            'active_suppliers': len(suppliers['analysis']),
            'total_quantity_purchased': total_quantity,
        },
        'spending': {
            'time_based_spending': time_based_spending(invoices),
            'monthly_trends': months,
            'weekly_trends': weekly_trends(invoices),
            'spending_patterns': spending_patterns(invoices),
            'growth_analysis': growth_data,
        },
        'suppliers': suppliers,
        'categories': categories,
        'products': product_analysis(invoices),
        'insights': financial_insights(suppliers, categories, months, growth_data),
    }
