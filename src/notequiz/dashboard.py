"""Stats dashboard labels, colors and achievements."""
from notequiz.models import QuizStats


def get_mastery_label(average_ease: float) -> str:
    if average_ease > 280:
        return "Expert"
    elif average_ease > 250:
        return "Avancé"
    elif average_ease > 200:
        return "Intermédiaire"
    return "Débutant"


def get_accuracy_label(accuracy: float) -> str:
    if accuracy >= 80:
        return "Excellent"
    elif accuracy >= 60:
        return "Bien"
    return "À améliorer"


def get_accuracy_color(accuracy: float) -> str:
    if accuracy >= 80:
        return "green"
    elif accuracy >= 60:
        return "yellow"
    return "red"


def get_achievements(stats: QuizStats) -> list[tuple[str, bool]]:
    """Achievement badges as (label, unlocked) pairs."""
    return [
        ("10 Questions", stats.total_questions >= 10),
        ("3 Jours", stats.streak_days >= 3),
        ("80% Précision", stats.accuracy >= 80),
        ("100 Questions", stats.total_questions >= 100),
    ]


def streak_dots(streak_days: int, width: int = 7) -> list[bool]:
    """Filled positions of the weekly streak bar."""
    return [i < streak_days % width for i in range(width)]


def due_ratio(stats: QuizStats) -> float:
    """Due reviews as a percentage of reviewed questions, capped at 100."""
    return min(stats.due_today / max(stats.total_questions, 1) * 100, 100.0)
