# content/experiments.py
"""
Focus areas et expériences suggérées, indexés par theme de statement.

Lookup pur (pas de génération) : la tension la plus basse d'une session
détermine le theme, le theme détermine le texte.
Le lead peut toujours réécrire le focus area / l'expérience à la clôture.
"""

THEME_GUIDANCE = {
    # ── Retro ────────────────────────────────────────────────
    "action_follow_through": {
        "focus_area": "Following through on retro actions",
        "experiment": "Pick one retro action only, give it an owner, and check it at the start of every Daily Scrum.",
    },
    "psychological_safety": {
        "focus_area": "Safety to speak up",
        "experiment": "Open the next retro with an anonymous round of written input before any discussion.",
    },
    "retro_format": {
        "focus_area": "Retro effectiveness",
        "experiment": "Rotate the retro facilitator and try a new format focused on root causes for the next two sprints.",
    },
    # ── Planning ─────────────────────────────────────────────
    "sprint_goal": {
        "focus_area": "Sprint Goal clarity",
        "experiment": "Write the Sprint Goal as one sentence on the board and refer to it in every Daily Scrum.",
    },
    "commitment": {
        "focus_area": "Realistic commitment",
        "experiment": "Plan 20% less than the average of the last three sprints and compare the outcome.",
    },
    "capacity": {
        "focus_area": "Capacity planning",
        "experiment": "Start planning with a five-minute capacity check: absences, support duty and known interruptions.",
    },
    # ── Scrum ────────────────────────────────────────────────
    "event_value": {
        "focus_area": "Value of Scrum events",
        "experiment": "End every event this sprint with a one-minute 'was this useful?' fist-of-five.",
    },
    "framework_fit": {
        "focus_area": "Making Scrum work for the team",
        "experiment": "List which parts of Scrum help and which hinder, and adapt one hindering practice for a sprint.",
    },
    "transparency": {
        "focus_area": "Transparency of work",
        "experiment": "Update the board before each Daily Scrum and mark every item blocked for more than a day.",
    },
    # ── Flow ─────────────────────────────────────────────────
    "work_in_progress": {
        "focus_area": "Limiting work in progress",
        "experiment": "Set a WIP limit of one item per person for the next sprint and stop starting, start finishing.",
    },
    "blockers": {
        "focus_area": "Unblocking work quickly",
        "experiment": "Add an explicit 'blocked' column and swarm on any item that stays there longer than a day.",
    },
    "definition_of_done": {
        "focus_area": "Shared definition of done",
        "experiment": "Review and rewrite the Definition of Done together and check it on every item before closing.",
    },
    # ── Collaboration ────────────────────────────────────────
    "knowledge_sharing": {
        "focus_area": "Knowledge sharing",
        "experiment": "Hold a weekly 30-minute show-and-tell where one team member walks through their recent work.",
    },
    "pairing": {
        "focus_area": "Working together",
        "experiment": "Pair on at least one story per person this sprint and share what you learned in the retro.",
    },
    "team_trust": {
        "focus_area": "Trust within the team",
        "experiment": "Make team working agreements explicit and revisit them at the end of the sprint.",
    },
    # ── Refinement ───────────────────────────────────────────
    "story_readiness": {
        "focus_area": "Ready stories",
        "experiment": "Agree on a Definition of Ready and only pull stories into the sprint that meet it.",
    },
    "backlog_health": {
        "focus_area": "Backlog focus",
        "experiment": "Remove or archive every backlog item older than three months that nobody can defend.",
    },
    "shared_understanding": {
        "focus_area": "Shared understanding of upcoming work",
        "experiment": "Start each refinement item with the Product Owner explaining the problem before the solution.",
    },
    # ── Ownership ────────────────────────────────────────────
    "decision_autonomy": {
        "focus_area": "Team decision-making",
        "experiment": "Map which decisions the team can make alone and agree with management to move one up.",
    },
    "accountability": {
        "focus_area": "Ownership of outcomes",
        "experiment": "Define one outcome metric for the sprint and review it together in the review.",
    },
    "initiative": {
        "focus_area": "Taking initiative",
        "experiment": "Reserve a small time box each sprint for improvements the team chooses itself.",
    },
    # ── Technical excellence ─────────────────────────────────
    "code_quality": {
        "focus_area": "Code quality",
        "experiment": "Apply the boy scout rule: every story leaves the touched code a little cleaner.",
    },
    "testing": {
        "focus_area": "Built-in quality",
        "experiment": "Write the test first for every bug fix this sprint.",
    },
    "delivery_pipeline": {
        "focus_area": "Delivery pipeline",
        "experiment": "Measure lead time from merge to production and remove the biggest manual step.",
    },
    # ── Demo ─────────────────────────────────────────────────
    "stakeholder_engagement": {
        "focus_area": "Stakeholder engagement",
        "experiment": "Personally invite the two most important stakeholders and ask them what they want to see.",
    },
    "feedback_loop": {
        "focus_area": "Using demo feedback",
        "experiment": "Capture demo feedback as backlog items during the demo and show what happened to them next time.",
    },
    "demo_value": {
        "focus_area": "Demo value",
        "experiment": "Demo only working software in a production-like environment, no slides.",
    },
}

# Fallback par angle si le theme est inconnu
ANGLE_EXPERIMENTS = {
    "retro":                "Pick one improvement from the retro and make it the only action for the next sprint.",
    "planning":             "Plan slightly less than usual and protect the Sprint Goal.",
    "scrum":                "Inspect one Scrum event and adapt it for the next sprint.",
    "flow":                 "Limit work in progress for one sprint and observe what happens.",
    "collaboration":        "Pair on one story per person this sprint.",
    "refinement":           "Agree on a Definition of Ready for the next sprint.",
    "ownership":            "Let the team make one decision it normally escalates.",
    "technical_excellence": "Reserve time for one technical improvement this sprint.",
    "demo":                 "Invite stakeholders personally to the next demo.",
}

GENERIC_EXPERIMENT = "Discuss the lowest-scoring statement as a team and agree on one small change to try for a sprint."
