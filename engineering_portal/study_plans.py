from __future__ import annotations

# Study plans are published as PDFs; the catalogue is static.
DEPARTMENTS = {
    "civil": ("الهندسة المدنية", "Civil Engineering"),
    "mech": ("الهندسة الميكانيكية", "Mechanical Engineering"),
    "elec": ("الهندسة الكهربائية", "Electrical Engineering"),
    "comp": ("هندسة الحاسوب", "Computer Engineering"),
    "indus": ("الهندسة الصناعية", "Industrial Engineering"),
    "chem": ("الهندسة الكيميائية", "Chemical Engineering"),
}

PLAN_YEARS = (2024, 2025)


def build_plans() -> list[dict[str, object]]:
    plans = []
    for slug in DEPARTMENTS:
        for year in PLAN_YEARS:
            plans.append(
                {
                    "department_slug": slug,
                    "year": year,
                    "title_ar": f"الخطة الدراسية {year}",
                    "title_en": f"Study Plan {year}",
                    "pdf_path": f"docs/plans/{slug}/plan-{year}.pdf",
                }
            )
    return plans


PLANS = build_plans()


def plans_by_year_desc() -> list[dict[str, object]]:
    return sorted(PLANS, key=lambda plan: plan["year"], reverse=True)


def find_plan(department_slug: str, year: int) -> dict[str, object] | None:
    for plan in PLANS:
        if plan["department_slug"] == department_slug and plan["year"] == year:
            return plan
    return None
