"""
Catalogue statique Tech Fiesta 2025 (événements, workshops, pass).

Les prix sont des chaînes affichables ("₹99"); `citPrice` est le tarif réduit
des étudiants de l'établissement. Les événements non-tech se règlent sur place.
"""

EVENTS = [
    # Événements techniques
    {
        "id": 1,
        "title": "Reverse Code",
        "type": "tech",
        "description": "Write code in reverse order! If the problem is to print 'hello world', you must code it backwards.",
        "tags": ["Programming", "Logic", "Creative Coding"],
        "price": "₹99",
        "citPrice": "₹59",
    },
    {
        "id": 2,
        "title": "Escape Room",
        "type": "tech",
        "description": "Solve interconnected problems to progress through levels and retrieve passwords using hints.",
        "tags": ["Problem Solving", "Security", "Puzzles"],
        "price": "₹99",
        "citPrice": "₹59",
        "maxTeamSize": 2,
    },
    {
        "id": 3,
        "title": "Prompt Engineering",
        "type": "tech",
        "description": "Complete tasks using AI tools within time limits: web pages, images and stories through prompts.",
        "tags": ["AI", "Prompt Engineering", "Creative AI"],
        "price": "₹99",
        "citPrice": "₹59",
    },
    {
        "id": 4,
        "title": "Project Presentation",
        "type": "tech",
        "description": "Develop feasible solutions to given problems and present practical approaches.",
        "tags": ["Presentation", "Innovation", "Problem Solving"],
        "price": "₹99",
        "citPrice": "₹59",
        "maxTeamSize": 2,
    },
    {
        "id": 5,
        "title": "Tech Trivia",
        "type": "tech",
        "description": "A competitive online quiz on core Computer Science concepts and emerging technologies.",
        "tags": ["Quiz", "Computer Science", "Competition"],
        "price": "₹99",
        "citPrice": "₹59",
        "maxTeamSize": 2,
    },
    {
        "id": 6,
        "title": "UI/UX",
        "type": "tech",
        "description": "An online design challenge where speed, logic and accuracy collide.",
        "tags": ["UI/UX", "Design", "Creativity", "Competition"],
        "price": "₹99",
        "citPrice": "₹59",
        "maxTeamSize": 2,
    },
    # Événements non techniques (paiement sur place)
    {
        "id": 7,
        "title": "BGMI",
        "type": "non-tech",
        "description": "Team up, strategize and compete in an action-packed BGMI tournament.",
        "tags": ["Gaming", "Teamwork", "Strategy", "Competition"],
        "price": "₹79",
    },
    {
        "id": 8,
        "title": "ADDZAP",
        "type": "non-tech",
        "description": "Create and present unique advertisements for fun products.",
        "tags": ["Storytelling", "Creativity", "Public Speaking"],
        "price": "₹79",
    },
    {
        "id": 9,
        "title": "JAM",
        "type": "non-tech",
        "description": "Just A Minute: speak on a given topic without hesitation, repetition or deviation.",
        "tags": ["Public Speaking", "Spontaneity", "Communication", "Fun"],
        "price": "₹79",
    },
    {
        "id": 11,
        "title": "Best Photography",
        "type": "non-tech",
        "description": "Submit your best photographs of the fest, judged on creativity and technique.",
        "tags": ["Photography", "Creativity", "Contest", "Art"],
        "price": "₹79",
    },
]

WORKSHOPS = [
    {
        "id": 1,
        "title": "Full Stack Web Development",
        "category": "Development",
        "level": "Beginner",
        "duration": "3 hours",
        "venue": "Lab 1",
        "seats": 60,
        "available": True,
        "price": "₹100",
        "citPrice": "₹100",
    },
    {
        "id": 2,
        "title": "AI & Machine Learning Fundamentals",
        "category": "AI/ML",
        "level": "Intermediate",
        "duration": "3 hours",
        "venue": "Lab 2",
        "seats": 60,
        "available": True,
        "price": "₹100",
        "citPrice": "₹100",
    },
    {
        "id": 3,
        "title": "Cyber Security Essentials",
        "category": "Security",
        "level": "Beginner",
        "duration": "2 hours",
        "venue": "Seminar Hall",
        "seats": 80,
        "available": True,
        "price": "₹100",
        "citPrice": "₹100",
    },
    {
        "id": 4,
        "title": "IoT with Arduino",
        "category": "Hardware",
        "level": "Beginner",
        "duration": "3 hours",
        "venue": "Electronics Lab",
        "seats": 40,
        "available": True,
        "price": "₹100",
        "citPrice": "₹100",
    },
    {
        "id": 5,
        "title": "Cloud & DevOps",
        "category": "Cloud",
        "level": "Intermediate",
        "duration": "2 hours",
        "venue": "Lab 3",
        "seats": 50,
        "available": False,
        "price": "₹100",
        "citPrice": "₹100",
    },
]

# techEvents.selectionEnabled=False: accès à tous les événements tech sans surcoût.
# techEvents.included: nombre d'événements tech inclus quand la sélection est active.
# workshops.allowExtra: workshops supplémentaires facturés au tarif forfaitaire.
PASSES = [
    {
        "id": 1,
        "title": "Tech Pass",
        "description": "Three technical events of your choice, extra events at the event price.",
        "price": "₹249",
        "citPrice": "₹149",
        "techEvents": {"selectionEnabled": True, "included": 3},
        "workshops": {"included": 0, "allowExtra": True},
        "available": True,
    },
    {
        "id": 2,
        "title": "Workshop Pass",
        "description": "One technical event and one workshop, extra workshops at the flat fee.",
        "price": "₹179",
        "citPrice": "₹129",
        "techEvents": {"selectionEnabled": True, "included": 1},
        "workshops": {"included": 1, "allowExtra": True},
        "available": True,
    },
    {
        "id": 3,
        "title": "All Access Pass",
        "description": "Every technical event and up to two workshops.",
        "price": "₹499",
        "citPrice": "₹349",
        "techEvents": {"selectionEnabled": False, "included": 0},
        "workshops": {"included": 2, "allowExtra": False},
        "available": True,
    },
]
