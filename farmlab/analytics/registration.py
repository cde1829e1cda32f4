"""
Market analytics over registration wizard responses.

Each response is a flat dict of the wizard answers plus ``roles``,
``country`` and ``submitted_at``.
"""
from .periods import month_key, week_key
from .rounding import round_half_up, percentage

INTEREST_FIELDS = (
    'collaboration_interest',
    'data_interest',
    'industry_interest',
    'interest_area',
    'follow_topics',
)

EXPERIENCE_SCORES = {'beginner': 1, 'intermediate': 2, 'advanced': 3, 'expert': 4}

INVESTOR_ROLE = 'Investor / Business Developer'
INVESTMENT_INTEREST = 'Sponsorship or investment'


def as_list(value):
    return value if isinstance(value, list) else []


def distribution(counts, whole):
    """Counts as ``{category, count, percentage}`` rows, largest first"""
    rows = [
        {'category': category, 'count': count, 'percentage': percentage(count, whole)}
        for category, count in counts.items()
    ]
    return sorted(rows, key=lambda row: row['count'], reverse=True)


def count_values(responses, field):
    counts = {}
    for response in responses:
        value = response.get(field)
        if value:
            counts[value] = counts.get(value, 0) + 1
    return counts


def count_lists(responses, *fields):
    counts = {}
    for response in responses:
        for field in fields:
            for value in as_list(response.get(field)):
                counts[value] = counts.get(value, 0) + 1
    return counts


def single_choice(responses, field):
    """Share of each answer among the responses that gave one"""
    counts = count_values(responses, field)
    return distribution(counts, sum(counts.values()))


def multi_choice(responses, *fields):
    """Share of each answer among all responses"""
    return distribution(count_lists(responses, *fields), len(responses))


def geography(responses):
    counts = {}
    for response in responses:
        country = response.get('country') or 'Unknown'
        counts[country] = counts.get(country, 0) + 1
    return distribution(counts, len(responses))


def average_tech_experience(responses):
    scores = [
        EXPERIENCE_SCORES[r['experience_level']]
        for r in responses if r.get('experience_level') in EXPERIENCE_SCORES
    ]
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores), 2)


def time_trends(responses):
    monthly, weekly = {}, {}
    for response in responses:
        day = response['submitted_at'].date()
        monthly[month_key(day)] = monthly.get(month_key(day), 0) + 1
        weekly[week_key(day)] = weekly.get(week_key(day), 0) + 1
    return {
        'monthly': [{'period': k, 'count': v} for k, v in sorted(monthly.items())],
        'weekly': [{'period': k, 'count': v} for k, v in sorted(weekly.items())][-12:],
    }


def role_combinations(responses):
    combinations = {}
    for response in responses:
        roles = as_list(response.get('roles'))
        if roles:
            combination = ' + '.join(sorted(roles))
            combinations[combination] = combinations.get(combination, 0) + 1
    return sorted(
        ({'combination': k, 'count': v} for k, v in combinations.items()),
        key=lambda c: c['count'],
        reverse=True,
    )


def tech_readiness(responses):
    levels = [r['experience_level'] for r in responses if r.get('experience_level')]
    advanced = sum(1 for level in levels if level in ('advanced', 'expert'))
    return {'advanced': percentage(advanced, len(levels)), 'total': len(levels)}


def investment_opportunities(responses):
    investors = [
        r for r in responses
        if INVESTOR_ROLE in as_list(r.get('roles'))
        or INVESTMENT_INTEREST in as_list(r.get('industry_interest'))
    ]
    focus = count_values(investors, 'investment_focus')
    if focus:
        top = max(focus.items(), key=lambda item: item[1])[0]
        description = f"{len(investors)} potential investors, primarily interested in {top}"
    else:
        description = f"{len(investors)} potential investors identified"
    return {'count': len(investors), 'description': description}


def market_insights(responses):
    segments = [c['combination'] for c in role_combinations(responses)[:3]]
    readiness = tech_readiness(responses)
    return [
        {
            'type': 'market_segment',
            'title': 'Primary Market Segments',
            'description': f"Top user segments: {', '.join(segments)}",
            'impact': 'high',
        },
        {
            'type': 'technology_adoption',
            'title': 'Technology Adoption Readiness',
            'description': f"{readiness['advanced']}% of users have advanced/expert tech experience",
            'impact': 'medium',
        },
        {
            'type': 'investment_opportunity',
            'title': 'Investment Focus Areas',
            'description': investment_opportunities(responses)['description'],
            'impact': 'high',
        },
    ]


def calculate_registration_analytics(responses):
    total = len(responses)
    if total == 0:
        return {
            'total_responses': 0,
            'demographics': {},
            'interests': {},
            'trends': {},
            'insights': [],
        }

    roles = multi_choice(responses, 'roles')
    countries = geography(responses)
    farm_sizes = single_choice(responses, 'farm_size')

    return {
        'total_responses': total,
        'summary': {
            'primary_roles': roles,
            'top_countries': countries[:5],
            'avg_tech_experience': average_tech_experience(responses),
            'most_common_farm_size': farm_sizes[0]['category'] if farm_sizes else 'N/A',
        },
        'demographics': {
            'roles': roles,
            'geography': countries,
            'farm_sizes': farm_sizes,
            'tech_experience': single_choice(responses, 'experience_level'),
        },
        'interests': {
            'categories': multi_choice(responses, *INTEREST_FIELDS)[:10],
            'challenges': multi_choice(responses, 'challenges'),
            'priorities': multi_choice(responses, 'priorities'),
            'investment_focus': single_choice(responses, 'investment_focus'),
        },
        'preferences': {
            'participation_mode': multi_choice(responses, 'participation_mode'),
            'pricing_model': single_choice(responses, 'pricing_model'),
        },
        'trends': time_trends(responses),
        'insights': market_insights(responses),
    }
