from mealgrid.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
MEALS_FILE = DATA_DIR / 'meals.json'
MEAL_PLANS_FILE = DATA_DIR / 'meal_plans.json'
PLAN_ACCESS_FILE = DATA_DIR / 'meal_plan_access.json'
SHARE_LINKS_FILE = DATA_DIR / 'share_links.json'
USERS_FILE = DATA_DIR / 'users.json'
LOCAL_STORE_FILE = DATA_DIR / 'local_meals.json'

__all__ = ['DATA_DIR', 'MEALS_FILE', 'MEAL_PLANS_FILE', 'PLAN_ACCESS_FILE',
           'SHARE_LINKS_FILE', 'USERS_FILE', 'LOCAL_STORE_FILE']
