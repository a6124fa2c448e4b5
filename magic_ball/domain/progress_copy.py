"""Helper text and colour phase shown while the ball is being scratched."""


def progress_message(progress: float) -> str:
    if progress < 10:
        return "Ну, почнемо магію..."
    if progress < 40:
        return "Ого, пішло тепло!"
    if progress < 70:
        return "Блищить, як лисина у Він Дізеля!"
    if progress < 90:
        return "Тільки не протри до зірок!"
    if progress < 100:
        return "Завантаження магії... 99%..."
    return ""


def progress_phase(progress: float) -> str:
    if progress < 30:
        return "blue"
    if progress < 70:
        return "purple"
    if progress < 90:
        return "gold"
    return "white"  # critical mass
