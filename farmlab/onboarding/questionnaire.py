"""
Registration wizard definition and validation.

The wizard always starts with ``basic_info`` and ``user_type``. Every role
picked in ``user_type`` adds its branch step, in the order the roles were
picked, and the wizard ends with ``final_section``.
"""
import re

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

FORM_TITLE = 'FarmLab Registration & Market Intelligence Form'

ROLE_FARMER = 'Farmer / Grower'
ROLE_TECHNOLOGIST = 'Technologist / Developer / Engineer'
ROLE_RESEARCHER = 'Researcher / Academic'
ROLE_INDUSTRY = 'Industry Professional (Agri-related, food, energy, logistics, etc.)'
ROLE_INVESTOR = 'Investor / Business Developer'
ROLE_STUDENT = 'Student / Educator'
ROLE_ENTHUSIAST = 'Enthusiast / Curious Observer'

ROLES = [
    ROLE_FARMER,
    ROLE_TECHNOLOGIST,
    ROLE_RESEARCHER,
    ROLE_INDUSTRY,
    ROLE_INVESTOR,
    ROLE_STUDENT,
    ROLE_ENTHUSIAST,
]


def question(question_id, label, kind, required=False, options=None, **extra):
    q = {'id': question_id, 'label': label, 'type': kind, 'required': required}
    if options is not None:
        q['options'] = options
    q.update(extra)
    return q


BASE_STEPS = [
    {
        'id': 'basic_info',
        'title': 'Basic Information',
        'questions': [
            question('full_name', 'Full Name', 'text', required=True),
            question('email', 'Email Address', 'email', required=True),
            question('password', 'Create Password', 'password', required=True, min_length=8),
            question('country', 'Country / Region', 'text', required=True),
            question('organization', 'Organization / Farm / Company Name', 'text'),
        ],
    },
    {
        'id': 'user_type',
        'title': 'Your Role & Interest',
        'description': 'This determines which question paths you’ll see next.',
        'questions': [
            question(
                'roles', 'Which of the following describe you? (You can select more than one)',
                'multi-select', required=True, options=ROLES,
            ),
        ],
    },
]

BRANCHES = {
    'branch_farmer': {
        'title': 'Farmer Path',
        'questions': [
            question('farm_size', 'Farm size', 'single-select',
                     options=['< 1 ha', '1–5 ha', '5–20 ha', '20+ ha']),
            question('production_type', 'Type of production (select all that apply)', 'multi-select', options=[
                'Vegetables', 'Grains / Cereals', 'Fruits / Orchards', 'Livestock / Dairy',
                'Greenhouse', 'Hydroponics / Vertical Farming', 'Mixed / Other',
            ]),
            question('current_tech_usage', 'What technologies do you already use?', 'multi-select', options=[
                'None — mostly manual', 'Drip or timed irrigation', 'Basic sensors (e.g., soil moisture)',
                'Farm management apps or software', 'IoT / automated control systems',
                'Drones / imaging / AI', 'Renewable energy solutions',
            ]),
            question('challenges', 'What are your biggest challenges? (Select up to 3)', 'multi-select', options=[
                'Water usage / irrigation optimization', 'Pest / disease detection', 'Labor shortages',
                'Climate unpredictability', 'Low yield / inefficiency', 'Feed / livestock cost',
                'Lack of technical support', 'Sustainability / soil health',
            ]),
            question('priorities', 'What are your top priorities in the next 2 years?', 'multi-select', options=[
                'Automate key operations', 'Reduce costs', 'Increase yield',
                'Transition to sustainable practices', 'Adopt smart farming solutions',
                'Collaborate with tech partners',
            ]),
        ],
    },
    'branch_technologist': {
        'title': 'Technologist Path',
        'questions': [
            question('expertise_area', 'What is your primary area of expertise?', 'single-select', options=[
                'IoT / Embedded Systems', 'Backend / API Development', 'Data Science / AI / ML',
                'Automation / Robotics', 'Hardware / Electronics Design', 'Cloud / Infrastructure',
                'Full-stack Development', 'Other',
            ]),
            question('collaboration_interest', 'What type of collaboration interests you?', 'multi-select', options=[
                'Build and integrate IoT devices', 'Develop APIs or dashboards',
                'Work with real-time sensor data', 'Contribute to open-source software',
                'Pilot-test solutions on real farms', 'Research and analytics projects',
            ]),
            question('data_interest', 'What kind of agricultural data would be most valuable to you?', 'multi-select', options=[
                'Sensor telemetry (soil, climate, etc.)', 'Plant growth / yield metrics', 'Livestock data',
                'Automation / control logs', 'Market and pricing trends', 'Other',
            ]),
        ],
    },
    'branch_industry': {
        'title': 'Industry / Related Sector Path',
        'questions': [
            question('sector', 'What sector are you in?', 'single-select', options=[
                'Agri-inputs (fertilizers, seeds, etc.)', 'Logistics / cold chain',
                'Food processing / packaging', 'Renewable energy', 'Agritech / SaaS',
                'Government / policy', 'Investment / VC', 'Other',
            ]),
            question('industry_interest', 'What are you most interested in exploring with FarmLab?', 'multi-select', options=[
                'Commercial partnerships', 'Product integration', 'Research collaboration',
                'Market intelligence', 'Pilot deployment', 'Sponsorship or investment',
            ]),
        ],
    },
    'branch_researcher': {
        'title': 'Researcher / Academic Path',
        'questions': [
            question('research_field', 'What is your research field or academic focus?', 'text', required=True),
            question('collab_interest', 'What type of collaboration interests you?', 'multi-select', options=[
                'Data access', 'Field trials', 'Joint publications', 'Student projects', 'Other',
            ]),
        ],
    },
    'branch_investor': {
        'title': 'Investor / Business Developer Path',
        'questions': [
            question('investment_focus', 'What is your main investment focus?', 'single-select', options=[
                'AgriTech', 'IoT / Hardware', 'SaaS / Software', 'Sustainability', 'Other',
            ]),
            question('ticket_size', 'Typical ticket size?', 'single-select', options=[
                '< $50k', '$50k–$250k', '$250k–$1M', '$1M+', 'Not sure',
            ]),
        ],
    },
    'branch_student': {
        'title': 'Student / Educator Path',
        'questions': [
            question('study_level', 'What is your level?', 'single-select', options=[
                'High school', 'Undergraduate', 'Graduate', 'Educator', 'Other',
            ]),
            question('interest_area', 'What are you most interested in?', 'multi-select', options=[
                'Internships', 'Research projects', 'Learning resources', 'Hackathons', 'Other',
            ]),
        ],
    },
    'branch_enthusiast': {
        'title': 'Enthusiast / Curious Observer Path',
        'questions': [
            question('interest_reason', 'What brings you to FarmLab?', 'text'),
            question('follow_topics', 'What topics would you like to follow?', 'multi-select', options=[
                'Smart farming', 'IoT', 'Sustainability', 'Market trends', 'All of the above',
            ]),
        ],
    },
}

BRANCH_FOR_ROLE = {
    ROLE_FARMER: 'branch_farmer',
    ROLE_TECHNOLOGIST: 'branch_technologist',
    ROLE_INDUSTRY: 'branch_industry',
    ROLE_RESEARCHER: 'branch_researcher',
    ROLE_INVESTOR: 'branch_investor',
    ROLE_STUDENT: 'branch_student',
    ROLE_ENTHUSIAST: 'branch_enthusiast',
}

FINAL_STEP = {
    'id': 'final_section',
    'title': 'Engagement & Monetization (All Users)',
    'questions': [
        question('participation_mode', 'How would you like to participate in FarmLab?', 'multi-select', options=[
            'Join the community / follow updates', 'Access data and dashboards', 'Join beta / pilot programs',
            'Partner commercially', 'Contribute to research',
        ]),
        question('pricing_model', 'What pricing model would you find most appealing?', 'single-select', options=[
            'Monthly subscription', 'One-time purchase', 'Pay-as-you-grow (based on farm size)',
            'Revenue-sharing model', 'Not sure yet',
        ]),
    ],
}

SECRET_FIELDS = ('password',)


def resolve_steps(roles):
    """Steps shown for the selected roles; unknown roles add no step"""
    branch_ids = []
    for role in roles or []:
        branch_id = BRANCH_FOR_ROLE.get(role)
        if branch_id and branch_id not in branch_ids:
            branch_ids.append(branch_id)

    steps = list(BASE_STEPS)
    steps.extend({'id': branch_id, **BRANCHES[branch_id]} for branch_id in branch_ids)
    steps.append(FINAL_STEP)
    return steps


def get_step(step_id, roles=None):
    for step in resolve_steps(roles if roles is not None else ROLES):
        if step['id'] == step_id:
            return step
    return None


def is_blank(value):
    return value is None or value == '' or value == [] or value is False


def validate_question(q, value):
    """Error message for one answer, or None"""
    if is_blank(value):
        return 'Required' if q['required'] else None

    if q['type'] in ('text', 'email', 'password') and not isinstance(value, str):
        return 'Expected text'
    if q['type'] == 'email' and not (isinstance(value, str) and EMAIL_RE.match(value)):
        return 'Invalid email'
    if q['type'] == 'password' and q.get('min_length') and len(str(value)) < q['min_length']:
        return f"Password must be at least {q['min_length']} characters"
    if q['type'] == 'single-select' and value not in q['options']:
        return 'Invalid choice'
    if q['type'] == 'multi-select':
        if not isinstance(value, list):
            return 'Expected a list of choices'
        if any(choice not in q['options'] for choice in value):
            return 'Invalid choice'
    return None


def validate_step(step, answers):
    errors = {}
    for q in step['questions']:
        error = validate_question(q, answers.get(q['id']))
        if error:
            errors[q['id']] = error
    return errors


def next_step_id(step_id, roles):
    ids = [step['id'] for step in resolve_steps(roles)]
    if step_id not in ids:
        return None
    position = ids.index(step_id)
    return ids[position + 1] if position + 1 < len(ids) else None


def validate_answers(answers):
    """Validate every step the selected roles resolve to"""
    errors = {}
    for step in resolve_steps(answers.get('roles')):
        errors.update(validate_step(step, answers))
    return errors


def public_answers(answers):
    """Answers of the resolved steps without secrets"""
    known = {q['id'] for step in resolve_steps(answers.get('roles')) for q in step['questions']}
    return {k: v for k, v in answers.items() if k in known and k not in SECRET_FIELDS}
