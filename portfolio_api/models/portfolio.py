"""Portfolio document shapes and the content a fresh store starts with."""

from pydantic import BaseModel, Field

PROFILE_FIELDS = ('name', 'title', 'bio', 'about', 'interests', 'quickFacts')

DEFAULT_PORTFOLIO = {
    'profile': {
        'name': 'John Doe',
        'title': 'Full Stack Developer & UI/UX Designer',
        'bio': 'I create beautiful, functional, and user-centered digital experiences that bring ideas to life.',
        'about': (
            "I'm a passionate developer with over 5 years of experience creating digital solutions. "
            'I love turning complex problems into simple, beautiful designs.'
        ),
        'interests': (
            "When I'm not coding, you'll find me exploring new technologies, contributing to "
            'open-source projects, or enjoying outdoor activities.'
        ),
        'quickFacts': [
            '🎓 Computer Science Graduate',
            '💼 5+ Years Experience',
            '🌍 Remote Work Enthusiast',
            '🚀 Always Learning',
        ],
    },
    'skills': [
        'React', 'JavaScript', 'Node.js', 'Python',
        'Tailwind CSS', 'TypeScript', 'MongoDB', 'AWS',
        'Git', 'Docker', 'Figma', 'Adobe XD',
    ],
    'projects': [
        {
            'id': 1,
            'title': 'E-Commerce Platform',
            'description': 'Full-stack e-commerce solution with React, Node.js, and Stripe integration.',
            'tech': ['React', 'Node.js', 'MongoDB'],
        },
        {
            'id': 2,
            'title': 'Task Management App',
            'description': 'Collaborative task management tool with real-time updates and team features.',
            'tech': ['React', 'Firebase', 'Tailwind'],
        },
        {
            'id': 3,
            'title': 'Weather Dashboard',
            'description': 'Beautiful weather app with location-based forecasts and interactive maps.',
            'tech': ['JavaScript', 'OpenWeather API', 'Chart.js'],
        },
    ],
    'socialLinks': {
        'linkedin': '#',
        'github': '#',
        'twitter': '#',
    },
}

DEFAULT_PREFERENCES = {
    'theme': 'light',
    'language': 'en',
    'colorScheme': 'blue',
}


class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    title: str | None = None
    bio: str | None = None
    about: str | None = None
    interests: str | None = None
    quick_facts: list[str] | None = Field(default=None, alias='quickFacts')

    class Config:
        populate_by_name = True


class ProjectRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    tech: list[str] | str | None = None


def normalize_tech(tech: list[str] | str) -> list[str]:
    return list(tech) if isinstance(tech, list) else [tech]
