from ..models import CustomModel


class DashboardStats(CustomModel):
    total_users: int
    total_articles: int
    published_articles: int
    draft_articles: int
    recent_users: int
