# upsc_prep/core/dummy_data.py
"""Built-in catalogues served while the corresponding tables are still empty"""

from typing import List, Dict, Any

CORE_SUBJECTS = ["History", "Geography", "Indian Polity", "Economy"]

MOCK_TEST_SUBJECTS: List[Dict[str, Any]] = [
    {"name": "All Subjects", "count": 0},
    {"name": "History", "count": 348},
    {"name": "Geography", "count": 398},
    {"name": "Indian Polity", "count": 348},
    {"name": "Economy", "count": 368},
    {"name": "Science & Technology", "count": 215},
    {"name": "Environment", "count": 180},
    {"name": "Art & Culture", "count": 145},
]

MOCK_TEST_CONFIG: Dict[str, Any] = {
    "sources": [
        {"id": "daily_mcq", "name": "Daily MCQ", "description": "From daily practice"},
        {"id": "pyq", "name": "Practice PYQ", "description": "Previous year questions"},
        {"id": "subject_wise", "name": "Subject-wise", "description": "Topic-focused practice"},
        {"id": "mixed", "name": "Mixed Bag", "description": "Random mix"},
        {"id": "full_length", "name": "Full Length Test", "description": "Complete exam simulation", "isPro": True},
    ],
    "examModes": [
        {"id": "prelims", "name": "Prelims", "duration": 120},
        {"id": "mains", "name": "Mains"},
    ],
    "paperTypes": ["GS Paper I", "GS Paper II", "GS Paper III", "GS Paper IV"],
    "difficulties": [
        {"id": "easy", "name": "Easy", "description": "Foundation level"},
        {"id": "medium", "name": "Medium", "description": "Exam standard"},
        {"id": "hard", "name": "Hard", "description": "Advanced"},
        {"id": "mixed", "name": "Mixed", "description": "All levels"},
    ],
    "optionalSubjects": [
        "Anthropology", "Geography", "History", "Philosophy", "Political Science",
        "Psychology", "Public Administration", "Sociology", "Law", "Literature",
    ],
}

MIXED_DIFFICULTIES = ["Easy", "Moderate", "Hard"]

STATEMENT_OPTIONS = [
    {"id": "A", "text": "1 and 2 only"},
    {"id": "B", "text": "2 and 3 only"},
    {"id": "C", "text": "1 and 3 only"},
    {"id": "D", "text": "1, 2 and 3"},
]

DEFAULT_WEEKLY_GOALS = [
    {"title": "Complete Daily MCQs", "target_count": 7},
    {"title": "Practice Answer Writing", "target_count": 5},
    {"title": "Read Editorials", "target_count": 7},
    {"title": "Study Hours", "target_count": 35},
]

DEFAULT_SYLLABUS_COVERAGE = [
    {"subject": "Indian Polity", "totalTopics": 25, "covered": 18},
    {"subject": "History", "totalTopics": 30, "covered": 12},
    {"subject": "Geography", "totalTopics": 28, "covered": 20},
    {"subject": "Economy", "totalTopics": 22, "covered": 8},
    {"subject": "Science & Tech", "totalTopics": 18, "covered": 5},
    {"subject": "Environment", "totalTopics": 15, "covered": 10},
]

DEFAULT_VIDEO_SUBJECTS = [
    {"id": "1", "name": "Indian Polity", "description": "Constitution, Governance", "videoCount": 45},
    {"id": "2", "name": "History", "description": "Ancient, Medieval, Modern", "videoCount": 62},
    {"id": "3", "name": "Geography", "description": "Physical, Human, Indian", "videoCount": 38},
    {"id": "4", "name": "Economy", "description": "Macro, Micro, Indian Economy", "videoCount": 41},
    {"id": "5", "name": "Science & Technology", "description": "Current developments", "videoCount": 28},
    {"id": "6", "name": "Environment", "description": "Ecology, Biodiversity", "videoCount": 22},
    {"id": "7", "name": "Ethics", "description": "GS Paper IV", "videoCount": 18},
    {"id": "8", "name": "Current Affairs", "description": "Monthly compilations", "videoCount": 35},
]

DEFAULT_VIDEO_STATS = {"lectures": 500, "subjects": 12, "hours_per_lecture": 0.75}

DEFAULT_LIBRARY_SUBJECTS = [
    {"id": "1", "name": "Indian Polity", "description": "M. Laxmikanth", "tags": ["Prelims", "Mains"], "chapterCount": 12, "pdfCount": 48},
    {"id": "2", "name": "History", "description": "Spectrum & Bipin Chandra", "tags": ["Prelims"], "chapterCount": 15, "pdfCount": 52},
    {"id": "3", "name": "Geography", "description": "Majid Husain & NCERT", "tags": ["Prelims", "Mains"], "chapterCount": 10, "pdfCount": 38},
    {"id": "4", "name": "Economy", "description": "Ramesh Singh & Sriram IAS", "tags": ["Prelims", "Mains"], "chapterCount": 14, "pdfCount": 45},
    {"id": "5", "name": "Science & Technology", "description": "Current focus", "tags": ["Prelims"], "chapterCount": 8, "pdfCount": 24},
    {"id": "6", "name": "Environment", "description": "Shankar IAS", "tags": ["Prelims", "Mains"], "chapterCount": 6, "pdfCount": 18},
]

DEFAULT_PRICING_PLANS = [
    {
        "id": "1",
        "name": "3 Month Plan",
        "price": 4999,
        "duration": "3 months",
        "features": [
            "All Daily MCQs & Answer Writing",
            "Basic Mock Tests",
            "Editorial Analysis",
            "Study Planner",
            "Email Support",
        ],
        "isPopular": False,
    },
    {
        "id": "2",
        "name": "6 Month Plan",
        "price": 7999,
        "duration": "6 months",
        "features": [
            "Everything in 3 Month Plan",
            "Unlimited Mock Tests",
            "AI Answer Evaluation",
            "Video Lectures Access",
            "Personal Mentor Support",
            "Priority Support",
        ],
        "isPopular": True,
    },
    {
        "id": "3",
        "name": "12 Month Plan",
        "price": 11999,
        "duration": "12 months",
        "features": [
            "Everything in 6 Month Plan",
            "1-on-1 Mentorship Sessions",
            "Complete Study Material Library",
            "Interview Preparation",
            "Lifetime Community Access",
            "Dedicated Study Manager",
        ],
        "isPopular": False,
    },
]

DEFAULT_TESTIMONIALS = [
    {
        "id": "1",
        "name": "Priya Sharma",
        "title": "IAS 2024 - AIR 45",
        "content": "The daily MCQ practice and personalized study planner were game-changers for my preparation. Jeet Sir's mentorship made all the difference.",
        "rating": 5,
    },
    {
        "id": "2",
        "name": "Rahul Verma",
        "title": "IAS 2024 - AIR 112",
        "content": "The AI-powered answer evaluation helped me improve my mains writing significantly. I saw a 30% improvement in my scores within 2 months.",
        "rating": 5,
    },
    {
        "id": "3",
        "name": "Anita Patel",
        "title": "IPS 2023 - AIR 89",
        "content": "The mock test analytics and subject-wise breakdown helped me identify and fix my weak areas systematically.",
        "rating": 5,
    },
]

# Feedback used when answers are evaluated without an LLM
DUMMY_EVALUATION_FEEDBACK = {
    "strengths": [
        "Good understanding of the core concept",
        "Well-structured argument with logical flow",
        "Relevant examples cited",
    ],
    "improvements": [
        "Could include more recent case studies",
        "Introduction could be more impactful",
        "Add a stronger conclusion",
    ],
    "suggestions": [
        "Reference constitutional provisions directly",
        "Include a diagram or flowchart where applicable",
        "Cite committee recommendations (e.g., Sarkaria Commission)",
    ],
    "detailed_feedback": (
        "Your answer demonstrates a solid grasp of the subject. The structure follows a logical "
        "progression. To improve further, focus on making your introduction more engaging and "
        "your conclusion more decisive."
    ),
}

# Sample content written by the startup seeder
SAMPLE_MCQ_QUESTIONS = [
    {
        "category": "Indian Polity",
        "difficulty": "Moderate",
        "question_text": "Which Article of the Constitution deals with the Finance Commission?",
        "options": [{"id": "A", "text": "Article 280"}, {"id": "B", "text": "Article 312"},
                    {"id": "C", "text": "Article 324"}, {"id": "D", "text": "Article 148"}],
        "correct_option": "A",
        "explanation": "Article 280 provides for a Finance Commission constituted every five years.",
    },
    {
        "category": "Geography",
        "difficulty": "Easy",
        "question_text": "The Tropic of Cancer does NOT pass through which of these states?",
        "options": [{"id": "A", "text": "Rajasthan"}, {"id": "B", "text": "Odisha"},
                    {"id": "C", "text": "Tripura"}, {"id": "D", "text": "Mizoram"}],
        "correct_option": "B",
        "explanation": "The Tropic of Cancer passes through eight states; Odisha is not one of them.",
    },
    {
        "category": "Economy",
        "difficulty": "Moderate",
        "question_text": "Which body in India sets the policy repo rate?",
        "options": [{"id": "A", "text": "Ministry of Finance"}, {"id": "B", "text": "NITI Aayog"},
                    {"id": "C", "text": "Monetary Policy Committee"}, {"id": "D", "text": "SEBI"}],
        "correct_option": "C",
        "explanation": "The RBI's Monetary Policy Committee decides the policy repo rate.",
    },
    {
        "category": "History",
        "difficulty": "Hard",
        "question_text": "The Poona Pact of 1932 was signed between Gandhi and whom?",
        "options": [{"id": "A", "text": "M. A. Jinnah"}, {"id": "B", "text": "B. R. Ambedkar"},
                    {"id": "C", "text": "Ramsay MacDonald"}, {"id": "D", "text": "Lord Irwin"}],
        "correct_option": "B",
        "explanation": "The Poona Pact was signed between Gandhi and Dr. B. R. Ambedkar.",
    },
    {
        "category": "Environment",
        "difficulty": "Easy",
        "question_text": "Which gas is the largest contributor to the anthropogenic greenhouse effect?",
        "options": [{"id": "A", "text": "Methane"}, {"id": "B", "text": "Nitrous oxide"},
                    {"id": "C", "text": "Carbon dioxide"}, {"id": "D", "text": "Ozone"}],
        "correct_option": "C",
        "explanation": "Carbon dioxide accounts for the largest share of anthropogenic radiative forcing.",
    },
]

SAMPLE_MAINS_QUESTION = {
    "title": "Cooperative Federalism",
    "question_text": (
        "Discuss the challenges to cooperative federalism in India in the context of recent "
        "Centre-State disputes over fiscal transfers."
    ),
    "instructions": "Answer in about 250 words. Use headings and cite constitutional provisions where relevant.",
    "paper": "GS Paper II",
    "subject": "Indian Polity",
    "marks": 15,
    "word_limit": 250,
    "time_limit": 20,
}

SAMPLE_EDITORIALS = [
    {
        "title": "Rethinking fiscal federalism",
        "source": "The Hindu",
        "category": "Indian Polity",
        "author": "Editorial Board",
        "summary": "The sixteenth Finance Commission must balance equity with efficiency.",
        "content": "## Context\n\nThe devolution formula is under strain.\n\n## Way forward\n\n"
                   "A transparent, rules-based approach to transfers would reduce friction.",
        "read_time": 6,
    },
    {
        "title": "Heatwaves and urban resilience",
        "source": "Indian Express",
        "category": "Environment",
        "author": "Editorial Board",
        "summary": "Cities need heat action plans that reach informal workers.",
        "content": "## Context\n\nRecord temperatures exposed gaps in preparedness.\n\n"
                   "## Way forward\n\nCool roofs, shaded streets and early warnings save lives.",
        "read_time": 5,
    },
]
