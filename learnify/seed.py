"""
Sample data for local development and demos

Every step is an upsert keyed on a natural id, so running it again does not
duplicate anything.
"""

import logging
from datetime import timedelta

from pymongo.errors import PyMongoError

from learnify.auth.security import hash_password
from learnify.common.timeutils import utcnow
from learnify.database import Database
from learnify.faculty.models import AISuggestion, FacultyCourse, Mentee
from learnify.models import ActiveCourse, Poll, PollOption, Quest, ResearchPost, Role, User

logger = logging.getLogger(__name__)

SAMPLE_FACULTY_ID = 6


def _sample_users():
    def courses(*entries):
        return [ActiveCourse(**entry) for entry in entries]

    return [
        (User(user_id=1, name="Alex Sharma", email="alex@learnonline.edu", password_hash="", role=Role.STUDENT,
              coins=11250, streak=14, academic_standing=90, gamification_level=60, course_progress=75,
              active_courses=courses(
                  {"course_id": 101, "title": "Introduction to AI", "progress": 75, "instructor": "Dr. Sen", "due_next": "Module 3 Quiz"},
                  {"course_id": 102, "title": "Machine Learning Basics", "progress": 40, "instructor": "Prof. Singh", "due_next": "Peer Review"},
                  {"course_id": 103, "title": "Data Structures & Algorithms", "progress": 90, "instructor": "Dr. Mehta", "due_next": "Assignment 4"},
              )), "student123"),
        (User(user_id=2, name="Jordan Lee", email="jordan@learnonline.edu", password_hash="", role=Role.STUDENT,
              coins=12500, streak=18, academic_standing=92, gamification_level=72, course_progress=82,
              active_courses=courses(
                  {"course_id": 104, "title": "Advanced Robotics", "progress": 68, "instructor": "Dr. Tan", "due_next": "Lab Report"},
              )), "student123"),
        (User(user_id=3, name="Casey Wong", email="casey@learnonline.edu", password_hash="", role=Role.STUDENT,
              coins=11800, streak=12, academic_standing=88, gamification_level=65, course_progress=70), "student123"),
        (User(user_id=4, name="Taylor Green", email="taylor@learnonline.edu", password_hash="", role=Role.STUDENT,
              coins=10900, streak=10, academic_standing=86, gamification_level=59, course_progress=66), "student123"),
        (User(user_id=5, name="Samira Khan", email="samira@learnonline.edu", password_hash="", role=Role.STUDENT,
              coins=10100, streak=8, academic_standing=84, gamification_level=55, course_progress=60), "student123"),
        (User(user_id=SAMPLE_FACULTY_ID, name="Dr. Meera Iyer", email="meera@learnonline.edu", password_hash="",
              role=Role.FACULTY, coins=5400, streak=6,
              active_courses=courses(
                  {"course_id": 101, "title": "Introduction to AI", "progress": 0},
                  {"course_id": 104, "title": "Advanced Robotics", "progress": 0},
              )), "faculty123"),
        (User(user_id=7, name="Admin User", email="admin@learnonline.edu", password_hash="", role=Role.ADMIN,
              coins=6000, streak=4), "admin123"),
    ]


SAMPLE_QUESTS = [
    Quest(quest_id=1, title="Complete Module 3 Quiz", question='Finish the quiz for "Introduction to AI"',
          icon="✅", difficulty="Easy", coins=50),
    Quest(quest_id=2, title="Review 3 Peer Submissions", question="Provide feedback on research projects",
          icon="📝", difficulty="Medium", coins=75),
    Quest(quest_id=3, title="Participate in Forum Discussion",
          question='Post a question or answer in "Machine Learning Basics"', icon="💬", difficulty="Easy", coins=25),
    Quest(quest_id=4, title="Lab Prep", question="Read the robotics lab brief before tomorrow",
          icon="🤖", difficulty="Medium", coins=40),
]

SAMPLE_POLLS = [
    Poll(poll_id=1, question="What should be our next cafeteria menu addition?", time_left="2 days left", options=[
        PollOption(text="South Indian Thali", votes=45),
        PollOption(text="Mexican Fiesta", votes=32),
        PollOption(text="Mediterranean Bowl", votes=28),
        PollOption(text="Asian Fusion", votes=25),
    ]),
    Poll(poll_id=2, question="Which sustainability initiative should we prioritize?", time_left="5 days left", options=[
        PollOption(text="Solar Panel Installation", votes=52),
        PollOption(text="Campus Recycling Program", votes=48),
        PollOption(text="Tree Plantation Drive", votes=38),
    ]),
]


def _sample_research_posts(now):
    return [
        ResearchPost(
            title="Breakthrough in AI-driven sustainable agriculture",
            summary="Our team published a paper on using neural networks to optimize crop rotation for improved yield and reduced environmental impact.",
            body="Our team published a paper on using neural networks to optimize crop rotation for improved yield and reduced environmental impact.",
            category="Collaboration", tags=["AI", "Sustainability", "AgriTech"],
            image_url="https://images.unsplash.com/photo-1498050108023-c5249f4df085?auto=format&fit=crop&w=1200&q=80",
            author_id=6, author_name="Dr. Evelyn Reed", author_role="Lead Researcher · AI Sustainability Lab",
            is_collaboration=True, likes=25, comments=18, collaborations=3,
            created_at=now - timedelta(hours=2), updated_at=now - timedelta(hours=2),
        ),
        ResearchPost(
            title="Need insight on quantum coherence times",
            summary="We're optimizing qubit coherence times under noisy conditions and looking for collaborators who can share resources or simulation tooling.",
            body="We're optimizing qubit coherence times under noisy conditions and looking for collaborators who can share resources or simulation tooling.",
            category="Collaboration", tags=["Quantum", "Physics", "Research"],
            author_id=1, author_name="Maria Sanchez", author_role="PhD Candidate · Quantum Computing",
            is_collaboration=True, likes=18, comments=9, collaborations=5,
            created_at=now - timedelta(hours=26), updated_at=now - timedelta(hours=26),
        ),
        ResearchPost(
            title="Validating a new compound for neurological disorders",
            summary="Preliminary results from our clinical validation look promising. Preparing for peer review and open to feedback before submission.",
            body="Preliminary results from our clinical validation look promising. Preparing for peer review and open to feedback before submission.",
            category="My Research", tags=["Neuroscience", "Drug Discovery", "Biotech"],
            image_url="https://images.unsplash.com/photo-1559750981-10ef0c45f05b?auto=format&fit=crop&w=1200&q=80",
            author_id=2, author_name="Sarah Williams", author_role="Research Fellow · NeuroLab",
            is_collaboration=False, likes=42, comments=12, collaborations=6,
            created_at=now - timedelta(hours=72), updated_at=now - timedelta(hours=72),
        ),
    ]


def _sample_dashboard(now):
    hours = lambda n: now - timedelta(hours=n)  # noqa: E731
    days = lambda n: now - timedelta(days=n)  # noqa: E731

    suggestions = [
        AISuggestion(title="Research Paper on Quantum Computing", course="Advanced Physics",
                     summary="AI summary: AI suggests minor grammatical corrections and highlights a weak conclusion argument.",
                     recommendation="Add real-world examples to strengthen the final section and provide a clearer thesis recap.",
                     grade_suggestion="B+", status="pending", created_at=hours(10), updated_at=hours(10)),
        AISuggestion(title="Midterm Exam Essay: Impact of AI on Society", course="Ethics in Technology",
                     summary="AI summary: AI identifies strong arguments but recommends more diverse real-world examples.",
                     recommendation="Encourage student to reference at least two global policy frameworks to add depth.",
                     grade_suggestion="A-", status="pending", created_at=hours(26), updated_at=hours(26)),
        AISuggestion(title="Programming Project: Secure Messaging App", course="Software Engineering",
                     summary="AI summary: AI detected a potential security vulnerability in the authentication module.",
                     recommendation="Added human review. Grade suggestion: C. Provide targeted remediation steps.",
                     grade_suggestion="C", status="needs_follow_up", created_at=hours(72), updated_at=hours(6)),
    ]
    mentees = [
        Mentee(name="Alice Johnson", status="active", next_session="Mon, Oct 02, 10:00 AM",
               note="AI Ethics project review", created_at=days(30), updated_at=hours(24)),
        Mentee(name="Bob Williams", status="meeting_soon", next_session="Wed, Oct 04, 3:30 PM",
               note="Capstone guidance", created_at=days(14), updated_at=hours(3)),
        Mentee(name="Charlie Davis", status="active", next_session="Fri, Nov 01, 11:00 AM",
               note="Grant proposal outline", created_at=days(45), updated_at=hours(48)),
        Mentee(name="Diana Smith", status="archived", note="Graduated", created_at=days(120), updated_at=days(60)),
    ]
    courses = [
        FacultyCourse(title="Introduction to Computer Science", status="published", code="CS101", last_updated=hours(72)),
        FacultyCourse(title="Calculus II", status="published", code="MTH202", last_updated=hours(48)),
        FacultyCourse(title="Ethics in AI", status="draft", code="ETH310", last_updated=hours(12)),
        FacultyCourse(title="World History: Ancient Civilizations", status="archived", code="HIS210",
                      last_updated=hours(240)),
    ]
    return {
        "faculty_id": SAMPLE_FACULTY_ID,
        "overview": {"courses_taught": 12, "students_mentored": 48, "average_grade": 92.0, "pending_reviews": 3},
        "ai_suggestions": [s.to_document() for s in suggestions],
        "mentorship": {"mentees": [m.to_document() for m in mentees], "last_updated": now},
        "courses": [c.to_document() for c in courses],
        "analytics": {
            "labels": ["Jan", "Feb", "Mar", "Apr", "May"],
            "students": [120, 132, 128, 140, 152],
            "avg_grade": [88, 87, 89, 90, 92],
        },
        "created_at": now,
        "updated_at": now,
    }


async def ensure_sample_data(db: Database):
    """
    Upsert demo users, quests, polls, completions, research posts and one
    faculty dashboard
    """
    now = utcnow()
    try:
        for user, password in _sample_users():
            user.password_hash = hash_password(password)
            user.email = user.email.lower()
            document = user.model_dump()
            # Counters are only written on first insert
            counters = {field: document.pop(field) for field in ("coins", "streak")}
            await db.users.update_one(
                {"user_id": user.user_id},
                {"$set": document, "$setOnInsert": counters},
                upsert=True,
            )

        for quest in SAMPLE_QUESTS:
            await db.quests.update_one({"quest_id": quest.quest_id}, {"$set": quest.model_dump()}, upsert=True)

        for poll in SAMPLE_POLLS:
            document = poll.model_dump()
            options = document.pop("options")
            await db.polls.update_one(
                {"poll_id": poll.poll_id},
                {"$set": document, "$setOnInsert": {"options": options}},
                upsert=True,
            )

        for user_id, quest_id, age in [(1, 1, timedelta(hours=48)), (2, 2, timedelta(hours=24))]:
            await db.user_quests.update_one(
                {"user_id": user_id, "quest_id": quest_id},
                {"$set": {"user_id": user_id, "quest_id": quest_id, "completed": True, "completed_at": now - age}},
                upsert=True,
            )

        for post in _sample_research_posts(now):
            document = post.model_dump(by_alias=True)
            document.pop("_id")
            await db.research_posts.update_one({"title": post.title}, {"$setOnInsert": document}, upsert=True)

        if await db.faculty_dashboards.count_documents({"faculty_id": SAMPLE_FACULTY_ID}) == 0:
            await db.faculty_dashboards.insert_one(_sample_dashboard(now))
    except PyMongoError:
        logger.exception("Failed to ensure sample data")
        return

    logger.info("Sample data ensured")
