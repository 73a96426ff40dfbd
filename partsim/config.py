# PartSim: Car-Part Production Line Simulation
# All time units are MINUTES; weights in kilograms.

# ── Simulation horizon ────────────────────────────────────────────────────────
SIM_DAYS        = 30
MINUTES_PER_DAY = 60
DEFAULT_SEED    = 42

# Transit slots between a machine's output and the production bin.
# A freshly produced part needs CONVEYOR_LENGTH ticks before it exits.
CONVEYOR_LENGTH = 10

# ── Factory metadata ──────────────────────────────────────────────────────────
FACTORY_NAME     = "Cruz Auto Components"
FACTORY_LOCATION = "Mayagüez, Puerto Rico"

# ── Machines ──────────────────────────────────────────────────────────────────
# One machine per part type.
# weight          : nominal part weight (kg)
# weight_error    : ± tolerance; realised weight is uniform in [w-err, w+err)
# period          : minutes per production cycle
# defect_interval : every Nth produced unit (0-based index) is defective
MACHINES = [
    {"id": 1, "name": "Engine Block",     "weight": 180.0, "weight_error": 2.5,  "period": 12, "defect_interval": 20},
    {"id": 2, "name": "Transmission",     "weight":  75.0, "weight_error": 1.5,  "period": 9,  "defect_interval": 15},
    {"id": 3, "name": "Brake Disc",       "weight":   8.5, "weight_error": 0.3,  "period": 4,  "defect_interval": 12},
    {"id": 4, "name": "Alternator",       "weight":   6.2, "weight_error": 0.2,  "period": 6,  "defect_interval": 10},
    {"id": 5, "name": "Spark Plug",       "weight":   0.05, "weight_error": 0.005, "period": 2, "defect_interval": 25},
    {"id": 6, "name": "Radiator",         "weight":  11.0, "weight_error": 0.6,  "period": 8,  "defect_interval": 18},
]

# ── Customer orders ───────────────────────────────────────────────────────────
# requested_parts uses the same "(id qty)-(id qty)" notation as the CSV input.
ORDERS = [
    {"id": 1, "customer": "Island Motors",        "requested_parts": "(1 20)-(2 25)"},
    {"id": 2, "customer": "Caribe Auto Repair",   "requested_parts": "(3 120)-(5 400)"},
    {"id": 3, "customer": "Ponce Fleet Services", "requested_parts": "(4 50)-(6 30)-(4 20)"},
    {"id": 4, "customer": "San Juan Garage",      "requested_parts": "(1 200)"},
    {"id": 5, "customer": "Bayamón Parts Depot",  "requested_parts": "(3 60)-(5 200)-(6 20)"},
    {"id": 6, "customer": "Aguadilla Racing",     "requested_parts": "(2 500)-(1 10)"},
]

# ── Scenario presets ──────────────────────────────────────────────────────────
SCENARIOS = {
    "shift": {
        "label":       "Single Shift",
        "description": "One 8-hour shift",
        "days":        1,
        "minutes":     480,
    },
    "week": {
        "label":       "Work Week",
        "description": "Five 8-hour days",
        "days":        5,
        "minutes":     480,
    },
    "month": {
        "label":       "Month",
        "description": "Thirty short 60-minute production windows",
        "days":        SIM_DAYS,
        "minutes":     MINUTES_PER_DAY,
    },
}
