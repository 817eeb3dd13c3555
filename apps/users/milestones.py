from decimal import Decimal

from .models import Mode

# A free lottery ticket for every ฿3,000 spent / ฿5,000 earned
CUSTOMER_SPENDING_MILESTONE = Decimal("3000")
FREELANCER_EARNING_MILESTONE = Decimal("5000")
LOTTERY_MONTHLY_GOAL = 5


def tickets_crossed(before, after, step):
    """Number of milestone multiples passed when a total moves from before to after."""
    if after <= before:
        return 0
    return int(after // step) - int(before // step)


def _bar(label, value, goal):
    return {
        "label": label,
        "value": value,
        "goal": goal,
        "remaining": max(goal - value, 0),
        "percent": min(int(value * 100 / goal), 100) if goal else 0,
    }


def milestone_progress(profile):
    if profile.mode == Mode.FREELANCER:
        money = _bar("รายได้สะสม", profile.earning_total, FREELANCER_EARNING_MILESTONE)
        hint = f"รับงานครบ ฿{FREELANCER_EARNING_MILESTONE:,.0f} รับตั๋วลอตเตอรี่ฟรี!"
    else:
        money = _bar("จ้างงานสะสม", profile.spending_total, CUSTOMER_SPENDING_MILESTONE)
        hint = f"จ้างงานครบ ฿{CUSTOMER_SPENDING_MILESTONE:,.0f} รับตั๋วลอตเตอรี่ฟรี!"

    return {
        "money": money,
        "jobs": _bar("จำนวนงาน", profile.total_jobs, 10),
        "lottery": _bar("ตั๋วลอตเตอรี่เดือนนี้", profile.lottery_count_this_month, LOTTERY_MONTHLY_GOAL),
        "hint": hint,
    }
