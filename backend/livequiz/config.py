import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    PORT = int(os.environ.get('PORT', '3000'))
    # Question countdown (seconds)
    QUESTION_DURATION_SEC = int(os.environ.get('QUESTION_DURATION_SEC', '10'))
    # Seconds between countdown ticks
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1'))
    POINTS_PER_ANSWER = int(os.environ.get('POINTS_PER_ANSWER', '10'))
    # Entries shown on leaderboard and end screens
    LEADERBOARD_SIZE = int(os.environ.get('LEADERBOARD_SIZE', '10'))
