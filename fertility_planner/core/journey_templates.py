"""
Journey Templates

Static content for the step-by-step treatment journey and the five-chapter
story board.  Keys match the JourneyStep / StoryBoardChapter columns so the
routers can pass each template straight to the ORM constructor.
"""

from typing import Any

JOURNEY_COMPLETION_DAYS = 90
DEFAULT_STORY_PATHWAY = "IVF"
DEFAULT_STORY_AGE = "30-34"
DEFAULT_STORY_TIME_TRYING = "1-2 years"

_BASE_STEPS: list[dict[str, Any]] = [
    {
        "step": 1,
        "title": "Initial Consultation",
        "description": (
            "Meet with your fertility specialist to discuss your medical "
            "history, concerns, and treatment options."
        ),
        "category": "consultation",
        "estimated_duration": "60-90 minutes",
        "can_be_remote": True,
        "requires_in_person": False,
        "preparation_steps": [
            "Gather all previous medical records",
            "List your questions and concerns",
            "Bring your partner if applicable",
            "Note your menstrual cycle patterns",
        ],
        "what_to_expect": (
            "Your doctor will review your history, perform a basic examination, "
            "and discuss potential treatment options. You'll have plenty of "
            "time for questions."
        ),
        "after_care": "Schedule recommended tests and follow-up appointments",
        "icon_name": "UserCheck",
        "patient_tips": [
            "Write down questions beforehand",
            "Bring a support person if it helps",
            "Take notes during the consultation",
            "Don't hesitate to ask for clarification",
        ],
    },
    {
        "step": 2,
        "title": "Comprehensive Fertility Testing",
        "description": (
            "Complete blood work, imaging studies, and other tests to "
            "understand your fertility status."
        ),
        "category": "test",
        "estimated_duration": "2-3 weeks",
        "can_be_remote": False,
        "requires_in_person": True,
        "preparation_steps": [
            "Fast if blood work requires it",
            "Schedule tests for appropriate cycle days",
            "Arrange time off for appointments",
            "Drink water before ultrasounds",
        ],
        "what_to_expect": (
            "Multiple appointments for blood draws, ultrasounds, and possibly "
            "an HSG. Some tests may cause mild discomfort."
        ),
        "after_care": (
            "Rest if needed after procedures; results typically available in "
            "1-2 weeks"
        ),
        "icon_name": "Activity",
        "patient_tips": [
            "Stay hydrated",
            "Bring headphones for relaxation",
            "Plan light activities after procedures",
            "Ask about pain management options",
        ],
    },
    {
        "step": 3,
        "title": "Treatment Planning Session",
        "description": (
            "Review test results and finalize your personalized treatment "
            "protocol."
        ),
        "category": "consultation",
        "estimated_duration": "45-60 minutes",
        "can_be_remote": True,
        "requires_in_person": False,
        "preparation_steps": [
            "Review your test results beforehand",
            "Research treatment options",
            "Prepare questions about the protocol",
            "Consider your schedule for treatment timing",
        ],
        "what_to_expect": (
            "Detailed discussion of your results, treatment options, success "
            "rates, and timeline. You'll receive your medication protocol."
        ),
        "after_care": "Order medications and schedule medication training",
        "icon_name": "FileText",
        "patient_tips": [
            "Take detailed notes",
            "Ask about alternative protocols",
            "Understand the timeline fully",
            "Discuss backup plans",
        ],
    },
]

_IVF_STEPS: list[dict[str, Any]] = [
    {
        "step": 4,
        "title": "Medication Training",
        "description": "Learn how to properly administer your fertility medications.",
        "category": "medication",
        "estimated_duration": "30-45 minutes",
        "can_be_remote": True,
        "requires_in_person": False,
        "preparation_steps": [
            "Ensure medications have arrived",
            "Set up a clean injection area",
            "Have your partner present if helpful",
            "Prepare questions about techniques",
        ],
        "what_to_expect": (
            "Detailed demonstration of injection techniques, storage "
            "requirements, and what to do if you miss a dose."
        ),
        "after_care": "Practice with saline if provided; set up medication schedule",
        "icon_name": "Syringe",
        "patient_tips": [
            "Practice on an orange first",
            "Set daily alarms for consistency",
            "Keep injection supplies organized",
            "Ice the area before injecting",
        ],
    },
    {
        "step": 5,
        "title": "Stimulation Phase Monitoring",
        "description": (
            "Regular monitoring appointments to track follicle development "
            "during medication phase."
        ),
        "category": "procedure",
        "estimated_duration": "15-20 minutes per visit",
        "can_be_remote": False,
        "requires_in_person": True,
        "preparation_steps": [
            "Take medications as scheduled",
            "Arrive with a full bladder for ultrasounds",
            "Track any symptoms or side effects",
            "Keep flexible schedule for appointments",
        ],
        "what_to_expect": (
            "Brief transvaginal ultrasounds and blood draws every 2-3 days to "
            "monitor response to medications."
        ),
        "after_care": (
            "Continue medications as directed; adjustments may be made based "
            "on results"
        ),
        "icon_name": "Monitor",
        "patient_tips": [
            "Wear comfortable clothing",
            "Stay hydrated",
            "Ask about follicle progress",
            "Be patient with scheduling changes",
        ],
    },
    {
        "step": 6,
        "title": "Egg Retrieval Procedure",
        "description": "Minor surgical procedure to collect mature eggs for fertilization.",
        "category": "procedure",
        "estimated_duration": "20-30 minutes",
        "can_be_remote": False,
        "requires_in_person": True,
        "preparation_steps": [
            "Fast after midnight before procedure",
            "Arrange transportation home",
            "Take prescribed pre-medications",
            "Remove nail polish and jewelry",
        ],
        "what_to_expect": (
            "Brief procedure under conscious sedation. You'll rest for 1-2 "
            "hours afterward before going home."
        ),
        "after_care": "Rest for the remainder of the day; light activities the next day",
        "icon_name": "Target",
        "patient_tips": [
            "Bring comfortable clothes to change into",
            "Plan a restful day afterward",
            "Stay hydrated",
            "Take prescribed pain medication if needed",
        ],
    },
    {
        "step": 7,
        "title": "Embryo Transfer",
        "description": "Placement of the embryo(s) into your uterus.",
        "category": "procedure",
        "estimated_duration": "15-20 minutes",
        "can_be_remote": False,
        "requires_in_person": True,
        "preparation_steps": [
            "Drink water to fill bladder",
            "Take prescribed medications",
            "Arrive relaxed and on time",
            "Bring your partner if desired",
        ],
        "what_to_expect": (
            "A gentle procedure similar to a pap smear. You'll see the embryo "
            "on ultrasound as it's transferred."
        ),
        "after_care": (
            "Rest for 15-30 minutes, then resume normal activities with some "
            "restrictions"
        ),
        "icon_name": "Heart",
        "patient_tips": [
            "Visualize success during the procedure",
            "Ask to see the embryo on screen",
            "Plan something special for after",
            "Trust the process",
        ],
    },
    {
        "step": 8,
        "title": "Pregnancy Test",
        "description": "Blood test to determine if the treatment was successful.",
        "category": "test",
        "estimated_duration": "5-10 minutes",
        "can_be_remote": False,
        "requires_in_person": True,
        "preparation_steps": [
            "Avoid home pregnancy tests",
            "Continue medications as directed",
            "Plan for both possible outcomes",
            "Arrange support for results",
        ],
        "what_to_expect": (
            "A simple blood draw followed by a wait for results (usually same day)."
        ),
        "after_care": (
            "Continue medications until instructed otherwise; celebrate your "
            "courage regardless of outcome"
        ),
        "icon_name": "TestTube",
        "patient_tips": [
            "Stay busy during the wait",
            "Have support available",
            "Remember you've been incredibly brave",
            "Focus on the present moment",
        ],
    },
]


def journey_step_templates(treatment_type: str = "IVF") -> list[dict[str, Any]]:
    """Step templates for a treatment type; IVF adds five procedure steps.

    Step 1 starts as "current", every other step as "upcoming".
    """
    steps = _BASE_STEPS + (_IVF_STEPS if treatment_type == "IVF" else [])
    return [
        dict(template, status="current" if template["step"] == 1 else "upcoming")
        for template in steps
    ]


def story_board_chapters(
    female_age: str | None,
    time_trying: str | None,
    primary_pathway: str | None,
) -> list[dict[str, Any]]:
    """Five story-board chapters personalised with the patient's details."""
    age = female_age or DEFAULT_STORY_AGE
    trying = time_trying or DEFAULT_STORY_TIME_TRYING
    treatment = primary_pathway or DEFAULT_STORY_PATHWAY

    return [
        {
            "chapter": 1,
            "title": "Your Fertility Journey Begins",
            "subtitle": "Understanding where you are and where you're going",
            "description": (
                "Welcome to your personalized fertility journey. Every journey "
                "is unique, and we're here to guide you through each step with "
                "evidence-based care and emotional support."
            ),
            "patient_content": (
                "Starting a fertility journey can feel overwhelming, but you're "
                "not alone. Based on your profile, we've created a personalized "
                f"roadmap that considers your age ({age}), how long you've been "
                f"trying ({trying}), and your unique medical history. This "
                "journey is about hope, science, and taking one step at a time."
            ),
            "partner_content": (
                "Your support as a partner is crucial in this journey. "
                "Understanding the process, being present for appointments when "
                "possible, and providing emotional support will make a "
                "significant difference."
            ),
            "family_content": (
                "Family support plays a vital role in fertility treatment "
                "success. Being understanding, patient, and offering practical "
                "help can greatly reduce stress for the couple."
            ),
            "action_items": [
                "Complete all initial assessments honestly",
                "Schedule your first consultation",
                "Start taking recommended supplements",
                "Begin tracking your cycle (if not already doing so)",
            ],
            "checklist_items": [
                "Medical history forms completed",
                "Insurance coverage verified",
                "Initial consultation scheduled",
                "Support system identified",
            ],
            "estimated_timeframe": "Week 1-2",
            "dependencies": [],
            "encouragement_note": (
                "Every successful pregnancy started with the first step. You're "
                "taking that step today, and that's something to be proud of."
            ),
            "common_concerns": [
                "How long will this process take?",
                "What if the treatment doesn't work?",
                "How much will this cost?",
                "Will there be side effects?",
            ],
            "support_tips": [
                "Join online support communities",
                "Practice stress-reduction techniques",
                "Maintain open communication with your partner",
                "Focus on what you can control today",
            ],
            "icon_name": "Heart",
            "color_theme": "hopeful",
        },
        {
            "chapter": 2,
            "title": "Comprehensive Medical Evaluation",
            "subtitle": "Understanding your body's unique story",
            "description": (
                "A thorough medical evaluation helps us understand exactly "
                "what's happening with your fertility and creates the foundation "
                "for your personalized treatment plan."
            ),
            "patient_content": (
                "This phase involves detailed testing for both partners. While "
                "it might seem like a lot of tests, each one provides valuable "
                "information that helps us create the most effective treatment "
                "plan for you. Think of it as gathering all the pieces of your "
                "fertility puzzle."
            ),
            "partner_content": (
                "Both partners typically need testing. Male factor contributes "
                "to about 30-40% of fertility challenges, so your participation "
                "in testing is equally important."
            ),
            "family_content": (
                "This is often an emotionally intense time with multiple "
                "appointments. Offering to help with scheduling, transportation, "
                "or just being available to talk can be incredibly supportive."
            ),
            "action_items": [
                "Complete all recommended blood tests",
                "Schedule imaging studies (ultrasounds, HSG if needed)",
                "Partner completes semen analysis",
                "Review genetic screening options",
            ],
            "checklist_items": [
                "Baseline blood work completed",
                "Pelvic ultrasound done",
                "HSG scheduled (if recommended)",
                "Semen analysis completed",
                "Results reviewed with doctor",
            ],
            "estimated_timeframe": "Week 3-6",
            "dependencies": ["Chapter 1 completed"],
            "encouragement_note": (
                "Knowledge is power. Every test brings us closer to "
                "understanding your body and optimizing your chances of success."
            ),
            "common_concerns": [
                "Will the tests be painful?",
                "What if they find something serious?",
                "How accurate are these tests?",
                "When will we get results?",
            ],
            "support_tips": [
                "Schedule tests during less stressful times",
                "Bring headphones for relaxation during procedures",
                "Plan something nice after difficult tests",
                "Ask questions - your medical team is here to help",
            ],
            "icon_name": "Activity",
            "color_theme": "scientific",
        },
        {
            "chapter": 3,
            "title": f"Your {treatment} Treatment Plan",
            "subtitle": "Personalized approach based on your unique needs",
            "description": (
                f"Based on your evaluation, {treatment} appears to be the most "
                "suitable treatment approach for your situation. This chapter "
                "outlines what to expect throughout your treatment cycle."
            ),
            "patient_content": (
                f"Your personalized {treatment} protocol has been designed "
                "specifically for your age, medical history, and test results. "
                "While the process may seem complex, our team will guide you "
                "through each step, and you'll have 24/7 support whenever you "
                "need it."
            ),
            "partner_content": (
                f"Your role during {treatment} treatment is crucial. From "
                "medication support to emotional encouragement, your partnership "
                "makes this journey stronger."
            ),
            "family_content": (
                f"{treatment} treatment involves multiple appointments and can "
                "be emotionally and physically demanding. Your understanding and "
                "flexibility with schedules and mood changes is deeply "
                "appreciated."
            ),
            "action_items": [
                "Attend treatment planning consultation",
                "Complete medication training session",
                "Schedule monitoring appointments",
                "Prepare emotionally and physically for treatment",
            ],
            "checklist_items": [
                "Treatment calendar received",
                "Medications ordered and received",
                "Injection training completed",
                "Monitoring schedule confirmed",
                "Emergency contact numbers saved",
            ],
            "estimated_timeframe": "Week 7-10",
            "dependencies": ["Chapter 2 completed", "Test results reviewed"],
            "encouragement_note": (
                f"{treatment} has helped millions of families worldwide. Your "
                "medical team has the experience and expertise to give you the "
                "best possible chance of success."
            ),
            "common_concerns": [
                "Will the medications make me feel sick?",
                "How many monitoring appointments will I need?",
                "What's the success rate for someone like me?",
                "What if I respond poorly to medications?",
            ],
            "support_tips": [
                "Set up a comfortable injection station at home",
                "Track your symptoms and share with your team",
                "Plan for flexibility in your schedule",
                "Connect with others going through similar treatment",
            ],
            "icon_name": "Target",
            "color_theme": "scientific",
        },
        {
            "chapter": 4,
            "title": "Treatment Cycle and Monitoring",
            "subtitle": "Day-by-day guidance through your treatment",
            "description": (
                "This is the active treatment phase where careful monitoring "
                "ensures optimal results. Every appointment and medication "
                "adjustment is precisely timed for your success."
            ),
            "patient_content": (
                "During this phase, you'll have frequent monitoring appointments "
                "to track how your body is responding to treatment. It's normal "
                "to feel anxious about results - remember that our team is "
                "making adjustments in real-time to optimize your outcomes."
            ),
            "partner_content": (
                "This can be an emotionally intense time with frequent "
                "appointments and hormone fluctuations. Your patience, "
                "understanding, and presence (when wanted) mean everything."
            ),
            "family_content": (
                "The treatment cycle requires strict timing and can cause "
                "stress. Being flexible with plans and offering practical "
                "support (like meal preparation) can be incredibly helpful."
            ),
            "action_items": [
                "Take medications exactly as prescribed",
                "Attend all monitoring appointments",
                "Track symptoms and side effects",
                "Follow pre-procedure instructions carefully",
            ],
            "checklist_items": [
                "Daily medications administered correctly",
                "Monitoring appointments attended",
                "Trigger shot administered (if applicable)",
                "Pre-procedure instructions followed",
                "Support person arranged for procedure day",
            ],
            "estimated_timeframe": "Week 11-12",
            "dependencies": ["Chapter 3 completed", "Medications started"],
            "encouragement_note": (
                "Every injection, every appointment, every careful step is "
                "bringing you closer to your goal. Your dedication to following "
                "the protocol shows incredible strength."
            ),
            "common_concerns": [
                "What if my follicles don't grow well?",
                "Will the procedure be painful?",
                "How will I know if it's working?",
                "What if we need to cancel the cycle?",
            ],
            "support_tips": [
                "Keep a treatment diary",
                "Prepare comfort items for procedure day",
                "Stay hydrated and eat well",
                "Practice relaxation techniques",
            ],
            "icon_name": "Calendar",
            "color_theme": "supportive",
        },
        {
            "chapter": 5,
            "title": "The Two-Week Wait and Beyond",
            "subtitle": "Navigating hope, anxiety, and next steps",
            "description": (
                "The period between treatment and testing is emotionally "
                "challenging. This chapter provides strategies for managing this "
                "time and understanding next steps regardless of the outcome."
            ),
            "patient_content": (
                "The two-week wait is often the hardest part of the fertility "
                "journey. It's completely normal to analyze every symptom and "
                "feel anxious. Remember that whatever the outcome, you've been "
                "incredibly brave, and there are always next steps available."
            ),
            "partner_content": (
                "Your partner may be especially emotional during this time. "
                "Being patient, avoiding pressure about symptoms, and planning "
                "gentle distractions can help immensely."
            ),
            "family_content": (
                "This is a time when well-meaning questions can feel "
                "overwhelming. Following the couple's lead about how much they "
                "want to share is the most supportive approach."
            ),
            "action_items": [
                "Follow post-procedure care instructions",
                "Schedule beta HCG test",
                "Practice self-care and stress management",
                "Plan for both possible outcomes",
            ],
            "checklist_items": [
                "Post-procedure medications taken",
                "Rest day(s) completed",
                "Beta test scheduled",
                "Support plan in place",
                "Follow-up appointment scheduled",
            ],
            "estimated_timeframe": "Week 13-14",
            "dependencies": ["Chapter 4 completed", "Procedure completed"],
            "encouragement_note": (
                "Regardless of this cycle's outcome, you've shown incredible "
                "courage and strength. Every step forward is progress, and your "
                "medical team is here to support you through whatever comes next."
            ),
            "common_concerns": [
                "Should I be feeling symptoms by now?",
                "What if the test is negative?",
                "How long should we wait before trying again?",
                "When will we know if it worked?",
            ],
            "support_tips": [
                "Avoid early home pregnancy tests",
                "Plan gentle activities to pass time",
                "Connect with support groups",
                "Focus on taking care of your body and mind",
            ],
            "icon_name": "Clock",
            "color_theme": "hopeful",
        },
    ]
