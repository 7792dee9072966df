"""Reference data for the FMS rubric and the supplementary SMC measures."""

# Seven basic movements, in display (radar chart) order
FMS_CATEGORIES: dict[str, dict[str, str]] = {
    "run": {"label": "Run", "description": "Basic running movement"},
    "balance_beam": {"label": "Balance beam", "description": "Moving along a beam while keeping balance"},
    "jump": {"label": "Jump", "description": "Vertical and horizontal jumping"},
    "throw": {"label": "Throw", "description": "Overhand throw"},
    "catch": {"label": "Catch", "description": "Catching a ball"},
    "dribble": {"label": "Dribble", "description": "Bouncing a ball"},
    "roll": {"label": "Roll", "description": "Forward and backward roll"},
}

FMS_ORDER: list[str] = list(FMS_CATEGORIES)

FMS_MIN_SCORE = 1
FMS_MAX_SCORE = 5

FMS_STAGE_DESCRIPTIONS: dict[int, str] = {
    1: "Initial: the basic form of the movement is not yet established",
    2: "Emerging: the basic form of the movement starts to appear",
    3: "Mature: the basic form of the movement is established",
    4: "Refined: the movement is smooth and efficient",
    5: "Proficient: the movement is automatic and can be applied",
}

SMC_MEASURES: dict[str, dict] = {
    "shuttle_run_sec": {
        "label": "10 m shuttle run (40 m total)",
        "unit": "s",
        "min": 5.0,
        "max": 60.0,
    },
    "paper_ball_throw_m": {
        "label": "Paper ball throw (5 sheets of A4)",
        "unit": "m",
        "min": 0.1,
        "max": 30.0,
    },
}
