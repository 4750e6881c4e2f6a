"""Built-in question templates for each agent and phase."""

from pydantic import BaseModel, Field

from docflow.conversation.models import Question, QuestionKind


class FollowupStrategy(BaseModel):
    """Follow-up questions asked when a response matches a trigger pattern."""

    trigger: str = Field(..., description="Case-insensitive regex matched against responses")
    questions: list[Question] = Field(default_factory=list)


class QuestionTemplate(BaseModel):
    """Questions an agent asks during one phase."""

    agent_name: str
    phase: str
    primary: list[Question] = Field(default_factory=list)
    secondary: list[Question] = Field(default_factory=list)
    followup_strategies: list[FollowupStrategy] = Field(default_factory=list)


def _q(
    id: str,
    text: str,
    category: str,
    *,
    kind: QuestionKind = QuestionKind.OPEN_ENDED,
    examples: list[str] | None = None,
    required: bool = True,
    triggers: list[str] | None = None,
    priority: int = 1,
) -> Question:
    return Question(
        id=id,
        text=text,
        kind=kind,
        examples=examples or [],
        required=required,
        category=category,
        priority=priority,
        followup_triggers=triggers or [],
    )


PRD_CREATOR = QuestionTemplate(
    agent_name="prd-creator",
    phase="prd",
    primary=[
        _q(
            "prd_problem_definition",
            "What specific problem or pain point are you trying to solve with this product?",
            "problem-definition",
            examples=[
                "Users struggle with managing multiple authentication systems",
                "Our current data processing is too slow for real-time needs",
            ],
            triggers=["slow", "performance", "speed", "time"],
        ),
        _q(
            "prd_target_users",
            "Who are your primary target users, and what are their key characteristics?",
            "user-identification",
            examples=[
                "Software developers who need to integrate authentication",
                "Business analysts who create reports from large datasets",
            ],
            triggers=["developer", "analyst", "customer", "user"],
        ),
        _q(
            "prd_solution_approach",
            "What's your proposed solution approach, and what makes it unique?",
            "solution-definition",
            examples=[
                "A unified authentication service with single sign-on",
                "Real-time data processing using streaming architecture",
            ],
            triggers=["api", "service", "platform", "system"],
        ),
        _q(
            "prd_success_criteria",
            "How will you measure success? What are your key performance indicators?",
            "success-metrics",
            examples=["Reduce authentication time by 50%", "Increase user engagement by 25%"],
            triggers=["metric", "kpi", "measure", "goal"],
        ),
    ],
    secondary=[
        _q(
            "prd_constraints",
            "What are your main technical, business, or timeline constraints?",
            "constraints",
            examples=["Must integrate with existing legacy systems", "Must launch within 6 months"],
            required=False,
            triggers=["budget", "timeline", "legacy", "constraint"],
            priority=2,
        ),
        _q(
            "prd_competition",
            "What existing solutions or competitors are you aware of?",
            "competitive-analysis",
            examples=["Auth0 and Okta for authentication"],
            required=False,
            triggers=["competitor", "alternative", "existing"],
            priority=3,
        ),
    ],
    followup_strategies=[
        FollowupStrategy(
            trigger=r"(performance|slow|speed|time|latency)",
            questions=[
                _q(
                    "prd_performance_details",
                    "What are your specific performance requirements? "
                    "What response times are acceptable?",
                    "performance-requirements",
                    kind=QuestionKind.STRUCTURED,
                    examples=["< 100ms response time", "99.9% uptime"],
                    required=False,
                    priority=2,
                )
            ],
        ),
        FollowupStrategy(
            trigger=r"(user|customer|developer|analyst)",
            questions=[
                _q(
                    "prd_user_details",
                    "Can you describe a typical day or workflow for these users?",
                    "user-workflow",
                    required=False,
                    priority=2,
                )
            ],
        ),
    ],
)

REQUIREMENTS_GATHERER = QuestionTemplate(
    agent_name="requirements-gatherer",
    phase="requirements",
    primary=[
        _q(
            "req_functional_needs",
            "What are the core functional requirements? What must the system be able to do?",
            "functional-requirements",
            kind=QuestionKind.STRUCTURED,
            examples=["Users must be able to authenticate using email and password"],
            triggers=["must", "shall", "required"],
        ),
        _q(
            "req_user_roles",
            "What different user roles will interact with the system, "
            "and what can each role do?",
            "user-roles",
            kind=QuestionKind.STRUCTURED,
            examples=["Admin: full access to all features and user management"],
            triggers=["role", "permission", "access"],
        ),
        _q(
            "req_acceptance_criteria",
            'For each main feature, what are the acceptance criteria? When is it considered "done"?',
            "acceptance-criteria",
            kind=QuestionKind.STRUCTURED,
            examples=[
                "WHEN user enters valid credentials THEN system SHALL authenticate within 2 seconds"
            ],
            triggers=["when", "if", "then", "shall"],
        ),
        _q(
            "req_constraints",
            "What are your non-functional requirements and constraints "
            "(performance, security, compliance)?",
            "non-functional-requirements",
            kind=QuestionKind.STRUCTURED,
            examples=["System must support 1000 concurrent users"],
            triggers=["performance", "security", "compliance"],
        ),
    ],
    secondary=[
        _q(
            "req_edge_cases",
            "What edge cases or error conditions should we consider?",
            "edge-cases",
            required=False,
            triggers=["error", "fail", "exception"],
            priority=2,
        ),
    ],
    followup_strategies=[
        FollowupStrategy(
            trigger=r"(performance|speed|latency|throughput)",
            questions=[
                _q(
                    "req_performance_specifics",
                    "Can you specify exact performance requirements with measurable criteria?",
                    "performance-details",
                    kind=QuestionKind.STRUCTURED,
                    examples=["Response time: < 200ms for 95% of requests"],
                    required=False,
                    priority=2,
                )
            ],
        ),
    ],
)

SOLUTION_ARCHITECT = QuestionTemplate(
    agent_name="solution-architect",
    phase="design",
    primary=[
        _q(
            "design_architecture",
            "What overall architecture do you have in mind, and what are its main building blocks?",
            "architecture",
            examples=["Event-driven services behind an API gateway"],
            triggers=["service", "event", "monolith", "layer"],
        ),
        _q(
            "design_components",
            "Which components make up the system, and how do they talk to each other?",
            "components",
            kind=QuestionKind.STRUCTURED,
            examples=["Auth service -> REST -> User service"],
            triggers=["api", "queue", "interface"],
        ),
        _q(
            "design_data",
            "What are the core data entities and where is each one stored?",
            "data",
            kind=QuestionKind.STRUCTURED,
            examples=["User, Session and AuditEvent in PostgreSQL"],
            triggers=["database", "schema", "storage"],
        ),
    ],
    secondary=[
        _q(
            "design_integrations",
            "Which external systems does the design integrate with?",
            "integration",
            required=False,
            triggers=["third-party", "external", "integration"],
            priority=2,
        ),
    ],
    followup_strategies=[
        FollowupStrategy(
            trigger=r"(scale|scaling|load|traffic)",
            questions=[
                _q(
                    "design_scaling",
                    "How should the architecture scale as load grows?",
                    "architecture",
                    required=False,
                    priority=2,
                )
            ],
        ),
    ],
)

SPECIFICATION_WRITER = QuestionTemplate(
    agent_name="specification-writer",
    phase="implementation",
    primary=[
        _q(
            "impl_tasks",
            "How would you break the work down into implementation tasks?",
            "tasks",
            kind=QuestionKind.STRUCTURED,
            examples=["1. Set up repository 2. Build auth module 3. Add reporting"],
            triggers=["task", "step", "milestone"],
        ),
        _q(
            "impl_timeline",
            "What timeline are you working towards, and what are the key milestones?",
            "timeline",
            examples=["Beta in 6 weeks, GA in 3 months"],
            triggers=["week", "month", "deadline"],
        ),
        _q(
            "impl_dependencies",
            "What dependencies or blockers could affect the implementation order?",
            "dependencies",
            triggers=["depends", "blocker", "before"],
        ),
    ],
    secondary=[
        _q(
            "impl_resources",
            "Who will work on this, and what skills does the team have?",
            "resources",
            required=False,
            triggers=["team", "developer", "skill"],
            priority=2,
        ),
    ],
    followup_strategies=[
        FollowupStrategy(
            trigger=r"(test|testing|qa)",
            questions=[
                _q(
                    "impl_testing",
                    "What testing approach will you use for each task?",
                    "tasks",
                    required=False,
                    priority=2,
                )
            ],
        ),
    ],
)

BUILT_IN_TEMPLATES: list[QuestionTemplate] = [
    PRD_CREATOR,
    REQUIREMENTS_GATHERER,
    SOLUTION_ARCHITECT,
    SPECIFICATION_WRITER,
]

DEFAULT_QUESTIONS: list[Question] = [
    _q("default_goal", "What are you trying to achieve with this document?", "general"),
    _q("default_audience", "Who is the intended audience for it?", "general"),
    _q(
        "default_scope",
        "What should be in scope, and what is explicitly out of scope?",
        "general",
    ),
]
