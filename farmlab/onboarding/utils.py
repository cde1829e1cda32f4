"""Keyword triage for contact form messages"""

HIGH_PRIORITY_KEYWORDS = ['urgent', 'emergency', 'critical', 'asap', 'immediately', 'down', 'not working', 'error']
LOW_PRIORITY_KEYWORDS = ['question', 'inquiry', 'info', 'information', 'demo', 'pricing']

TAG_KEYWORDS = [
    ('iot', ('iot', 'sensor')),
    ('farming', ('farm', 'agriculture')),
    ('pricing', ('pricing', 'cost')),
    ('demo', ('demo', 'demonstration')),
    ('support', ('support', 'help')),
    ('partnership', ('partnership', 'collaborate')),
]


def message_text(subject, message):
    return f"{subject} {message}".lower()


def classify_priority(subject, message):
    text = message_text(subject, message)
    if any(keyword in text for keyword in HIGH_PRIORITY_KEYWORDS):
        return 'high'
    if any(keyword in text for keyword in LOW_PRIORITY_KEYWORDS):
        return 'low'
    return 'medium'


def derive_tags(subject, message):
    text = message_text(subject, message)
    return [tag for tag, keywords in TAG_KEYWORDS if any(keyword in text for keyword in keywords)]
