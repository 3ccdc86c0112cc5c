# content/coaching.py
"""
Questions de coaching pour le Scrum Master / team lead.
Sélectionnées par engine/coaching.py selon la situation de l'équipe.
"""

COACH_QUESTIONS = {
    "low_pulse": [
        "What do you think is causing the team's energy to dip right now?",
        "If you could change one thing about your daily work, what would it be?",
        "What support does the team need that they're not getting?",
        "When was the last time the team felt really energized? What was different?",
        "What's the biggest blocker preventing the team from doing their best work?",
    ],
    "low_participation": [
        "What would make it easier for everyone to share their daily signal?",
        "Are there team members who feel disconnected? How can we include them?",
        "Is there a trust barrier preventing people from participating?",
        "What message does low participation send about team engagement?",
    ],
    "flow_problems": [
        "What's causing work to get stuck in your process?",
        "How often does unplanned work disrupt the sprint?",
        "What would 'done' look like if we could define it more clearly?",
        "Where are the handoffs creating delays?",
    ],
    "ownership_problems": [
        "What decisions does the team feel they can't make on their own?",
        "How can we increase the team's autonomy without losing alignment?",
        "What would it take for the team to feel fully responsible for outcomes?",
        "Where is permission-seeking slowing down the team?",
    ],
    "collaboration_problems": [
        "How well does knowledge flow between team members?",
        "What would better collaboration look like for this team?",
        "Are there silos forming within the team?",
        "How can we create more opportunities for pair work?",
    ],
    "scrum_problems": [
        "Which ceremonies feel most valuable? Which feel like a burden?",
        "Is the Sprint Goal actually guiding daily decisions?",
        "What would make the Daily Standup more useful?",
        "How can we make retro actions more impactful?",
    ],
    "general": [
        "What's working well that we should do more of?",
        "What's the one thing holding this team back from excellence?",
        "If you could wave a magic wand, what would change tomorrow?",
        "What conversation has the team been avoiding?",
        "What does success look like for this team in 3 months?",
    ],
}

# Angle de cérémonie → catégorie de questions
ANGLE_TO_CATEGORY = {
    "flow":                 "flow_problems",
    "ownership":            "ownership_problems",
    "collaboration":        "collaboration_problems",
    "scrum":                "scrum_problems",
    "technical_excellence": "general",
    "refinement":           "flow_problems",
    "planning":             "scrum_problems",
    "retro":                "scrum_problems",
    "demo":                 "collaboration_problems",
}
