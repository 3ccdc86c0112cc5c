# content/statements.py
"""
Catalogue figé des statements par angle de cérémonie, et métadonnées
des angles / niveaux Shu-Ha-Ri.

Jamais modifié à l'exécution. Chaque statement porte un `theme` :
la catégorie utilisée par engine/ceremonies/synthesis.py pour dériver
le focus area et l'expérience suggérée (content/experiments.py).

Niveaux :
    Shu (守) : apprendre les bases — cérémonies standard
    Ha  (破) : adapter consciemment — dynamique d'équipe & process
    Ri  (離) : maîtrise — pratiques avancées & auto-organisation
"""
from dataclasses import dataclass
from typing import Dict, List

from app.engine.ceremonies.synthesis import Statement
from app.shared.enums import CeremonyAngle, CeremonyLevel


@dataclass(frozen=True)
class AngleInfo:
    id: CeremonyAngle
    label: str
    description: str
    level: CeremonyLevel     # niveau requis pour accéder à l'angle


@dataclass(frozen=True)
class LevelInfo:
    id: CeremonyLevel
    kanji: str
    label: str
    subtitle: str
    description: str
    question_depth: str


LEVEL_ORDER: List[CeremonyLevel] = [CeremonyLevel.SHU, CeremonyLevel.HA, CeremonyLevel.RI]

CEREMONY_LEVELS: List[LevelInfo] = [
    LevelInfo(
        id=CeremonyLevel.SHU, kanji="守", label="Shu",
        subtitle="Learn the basics",
        description="Follow the structure. Build the habit. Trust the process.",
        question_depth="Basics",
    ),
    LevelInfo(
        id=CeremonyLevel.HA, kanji="破", label="Ha",
        subtitle="Adapt intentionally",
        description="Question the rules. Experiment safely. Find what works for your team.",
        question_depth="Adaptive",
    ),
    LevelInfo(
        id=CeremonyLevel.RI, kanji="離", label="Ri",
        subtitle="Mastery & own approach",
        description="Transcend the framework. Create your own process. Lead by example.",
        question_depth="Mastery",
    ),
]

ANGLES: List[AngleInfo] = [
    # ── SHU ──────────────────────────────────────────────────
    AngleInfo(CeremonyAngle.RETRO, "Retro",
              "Are we improving? Do actions lead to change?", CeremonyLevel.SHU),
    AngleInfo(CeremonyAngle.PLANNING, "Planning",
              "Is commitment realistic? Is the Sprint Goal clear?", CeremonyLevel.SHU),
    AngleInfo(CeremonyAngle.SCRUM, "Scrum",
              "Are events useful? Is the framework helping?", CeremonyLevel.SHU),
    # ── HA ───────────────────────────────────────────────────
    AngleInfo(CeremonyAngle.FLOW, "Flow",
              "Is work moving? Are we finishing what we start?", CeremonyLevel.HA),
    AngleInfo(CeremonyAngle.COLLABORATION, "Collaboration",
              "Are we working together? Is knowledge shared?", CeremonyLevel.HA),
    AngleInfo(CeremonyAngle.REFINEMENT, "Refinement",
              "Are stories ready? Is the backlog actionable?", CeremonyLevel.HA),
    # ── RI ───────────────────────────────────────────────────
    AngleInfo(CeremonyAngle.OWNERSHIP, "Ownership",
              "Does the team own it? Can we act without asking?", CeremonyLevel.RI),
    AngleInfo(CeremonyAngle.TECHNICAL_EXCELLENCE, "Technical Excellence",
              "Is the code getting better? Are we building quality in?", CeremonyLevel.RI),
    AngleInfo(CeremonyAngle.DEMO, "Demo",
              "Are stakeholders engaged? Is feedback valuable?", CeremonyLevel.RI),
]


def _catalog(angle: CeremonyAngle, entries) -> List[Statement]:
    return [
        Statement(id=f"{angle.value}_{i}", text=text, angle=angle, theme=theme)
        for i, (theme, text) in enumerate(entries, start=1)
    ]


STATEMENTS: Dict[CeremonyAngle, List[Statement]] = {
    CeremonyAngle.RETRO: _catalog(CeremonyAngle.RETRO, [
        ("action_follow_through", "Actions from our last retro were actually carried out."),
        ("action_follow_through", "Our retro actions lead to visible change in how we work."),
        ("psychological_safety", "I can raise uncomfortable topics in the retro without risk."),
        ("psychological_safety", "Everyone gets heard in our retrospectives, not just the loudest voices."),
        ("retro_format", "Our retro format helps us find the real causes of problems."),
        ("retro_format", "The retro feels like a good use of my time."),
    ]),
    CeremonyAngle.PLANNING: _catalog(CeremonyAngle.PLANNING, [
        ("sprint_goal", "The Sprint Goal is clear to everyone on the team."),
        ("sprint_goal", "The Sprint Goal helps us make choices during the sprint."),
        ("commitment", "What we commit to in planning is realistic."),
        ("commitment", "We rarely carry unfinished work over to the next sprint."),
        ("capacity", "Our planning takes absences and other work into account."),
        ("capacity", "We leave room for unplanned work in our plan."),
    ]),
    CeremonyAngle.SCRUM: _catalog(CeremonyAngle.SCRUM, [
        ("event_value", "Our Scrum events are useful, not a ritual."),
        ("event_value", "The Daily Scrum helps us coordinate the day's work."),
        ("framework_fit", "Scrum helps this team rather than slowing it down."),
        ("framework_fit", "Roles and responsibilities within Scrum are clear to me."),
        ("transparency", "Our board shows the real state of the work."),
        ("transparency", "Impediments become visible quickly and get picked up."),
    ]),
    CeremonyAngle.FLOW: _catalog(CeremonyAngle.FLOW, [
        ("work_in_progress", "We finish work before we start new work."),
        ("work_in_progress", "I rarely switch between several tasks at the same time."),
        ("blockers", "When work gets stuck, we notice it quickly."),
        ("blockers", "Waiting on others rarely slows down my work."),
        ("definition_of_done", "It is clear when a piece of work is done."),
        ("definition_of_done", "Work that we call done does not come back to us."),
    ]),
    CeremonyAngle.COLLABORATION: _catalog(CeremonyAngle.COLLABORATION, [
        ("knowledge_sharing", "Knowledge is shared so no one is a single point of failure."),
        ("knowledge_sharing", "I know what my teammates are working on."),
        ("pairing", "We regularly work together on the same problem."),
        ("pairing", "Asking a teammate for help feels natural here."),
        ("team_trust", "I trust my teammates to deliver on what they promise."),
        ("team_trust", "Disagreements in this team are handled respectfully."),
    ]),
    CeremonyAngle.REFINEMENT: _catalog(CeremonyAngle.REFINEMENT, [
        ("story_readiness", "Stories are clear enough to start when they enter a sprint."),
        ("story_readiness", "Acceptance criteria are known before we start building."),
        ("backlog_health", "The top of the backlog reflects what matters most."),
        ("backlog_health", "Our backlog is small enough to stay manageable."),
        ("shared_understanding", "The whole team understands the why behind upcoming work."),
        ("shared_understanding", "Our estimates are a shared view, not one person's guess."),
    ]),
    CeremonyAngle.OWNERSHIP: _catalog(CeremonyAngle.OWNERSHIP, [
        ("decision_autonomy", "The team can make most decisions without asking permission."),
        ("decision_autonomy", "We decide ourselves how we do our work."),
        ("accountability", "The team feels responsible for the outcome, not just the output."),
        ("accountability", "When something goes wrong, we fix it without pointing fingers."),
        ("initiative", "Team members take initiative without being asked."),
        ("initiative", "We improve our way of working on our own initiative."),
    ]),
    CeremonyAngle.TECHNICAL_EXCELLENCE: _catalog(CeremonyAngle.TECHNICAL_EXCELLENCE, [
        ("code_quality", "Our code is getting easier to change over time."),
        ("code_quality", "We pay down technical debt as part of normal work."),
        ("testing", "I trust our automated tests to catch regressions."),
        ("testing", "Quality is built in rather than checked at the end."),
        ("delivery_pipeline", "We can release a change to production quickly and safely."),
        ("delivery_pipeline", "Our build and deployment rarely get in the way."),
    ]),
    CeremonyAngle.DEMO: _catalog(CeremonyAngle.DEMO, [
        ("stakeholder_engagement", "The right stakeholders attend our demos."),
        ("stakeholder_engagement", "Stakeholders are genuinely interested in what we show."),
        ("feedback_loop", "Feedback from the demo changes what we build next."),
        ("feedback_loop", "We get honest feedback, not just polite applause."),
        ("demo_value", "We show working software, not slides."),
        ("demo_value", "The demo helps us see if we are building the right thing."),
    ]),
}


def get_statements(angle: CeremonyAngle) -> List[Statement]:
    return STATEMENTS[CeremonyAngle(angle)]


def get_angle_info(angle: CeremonyAngle) -> AngleInfo:
    """Angle inconnu → premier angle du catalogue."""
    return next((a for a in ANGLES if a.id == angle), ANGLES[0])


def get_level_info(level: CeremonyLevel) -> LevelInfo:
    return next((l for l in CEREMONY_LEVELS if l.id == level), CEREMONY_LEVELS[0])
