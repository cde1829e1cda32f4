"""
Headline numbers for the sponsor dashboard: contribution, reach and goals.

Goals follow the interests and expectations the sponsor gave when joining
the waitlist; without any, the two default goals are reported.
"""
from .rounding import round_half_up

RECENT_INVOICES = 3
RECENT_STOCK_UPDATES = 2
RECENT_ACTIVITY_LIMIT = 5

FOOD_REACH_FACTOR = 2
MEDICAL_REACH_FACTOR = 5


def stock_quantity(stock):
    return sum(s.get('quantity') or 0 for s in stock)


def community_reach(food_stock, medical_stock):
    """Animals the stock on hand can serve"""
    return stock_quantity(food_stock) * FOOD_REACH_FACTOR + stock_quantity(medical_stock) * MEDICAL_REACH_FACTOR


def recent_activities(invoices, food_stock, medical_stock):
    """
    The newest invoices followed by the most recently touched stock rows.
    ``invoices`` must be ordered newest first.
    """
    activities = [
        {
            'id': f"invoice-{invoice['id']}",
            'type': 'invoice',
            'description': f"New invoice: {invoice['invoice_number']} ({len(invoice['lines'])} items)",
            'date': invoice['created_at'].date().isoformat(),
            'value': invoice['grand_total'],
        }
        for invoice in invoices[:RECENT_INVOICES]
    ]

    touched = sorted(
        food_stock + medical_stock,
        key=lambda s: s.get('updated_at') or s['created_at'],
        reverse=True,
    )
    for stock in touched[:RECENT_STOCK_UPDATES]:
        activities.append({
            'id': f"{stock['family']}-stock-{stock['id']}",
            'type': 'stock',
            'description': f"Stock updated: {stock['quantity']} units available",
            'date': (stock.get('updated_at') or stock['created_at']).date().isoformat(),
        })
    return activities[:RECENT_ACTIVITY_LIMIT]


def goal(category, current, target, description):
    return {'category': category, 'current': current, 'target': target, 'description': description}


def goal_progress(metrics, interests=(), expectations=()):
    goals = []
    if 'sustainability' in interests or 'reduce_costs' in expectations:
        goals.append(goal(
            'Cost Efficiency', metrics['total_contribution'], 10000,
            'Reduce farm operational costs through strategic sponsorship',
        ))
    if 'monitoring' in interests or 'improve_quality' in expectations:
        goals.append(goal(
            'Quality Impact', metrics['farm_impact'], 100,
            'Improve farm quality metrics through technology and supplies',
        ))
    if 'scale_operations' in expectations or 'collaboration' in interests:
        goals.append(goal(
            'Community Reach', metrics['community_reach'], 1000,
            'Expand impact to benefit more animals and farming operations',
        ))

    if not goals:
        goals = [
            goal('Sponsorship Value', metrics['total_contribution'], 5000,
                 'Total value of farm sponsorship contributions'),
            goal('Items Sponsored', metrics['items_sponsored'], 50,
                 'Different types of farm supplies and equipment sponsored'),
        ]
    return goals


def calculate_sponsor_metrics(invoices, food_stock, medical_stock, interests=(), expectations=()):
    """
    ``invoices`` are invoice records newest first; ``interests`` and
    ``expectations`` are the sponsor's waitlist answers.
    """
    metrics = {
        'total_contribution': round_half_up(sum(i['grand_total'] or 0 for i in invoices)),
        'items_sponsored': len({line['name'] for i in invoices for line in i['lines']}),
        'farm_impact': round_half_up((stock_quantity(food_stock) + stock_quantity(medical_stock)) / 10),
        'community_reach': community_reach(food_stock, medical_stock),
    }
    metrics['recent_activities'] = recent_activities(invoices, food_stock, medical_stock)
    metrics['goal_progress'] = goal_progress(metrics, interests, expectations)
    return metrics
