"""
Default resume content.

Seed data shown by the editor for a new resume. Also used by the CLI when no
resume YAML is given.
"""

from pagefit.contexts.content.resume_data_structure import (
    ContactInfo,
    Education,
    JobExperience,
    PersonalInfo,
    Project,
    ResumeData,
    SectionTitles,
)


def default_resume() -> ResumeData:
    """Return a fresh copy of the sample resume (safe to mutate)."""
    return ResumeData(
        personal_info=PersonalInfo(
            name="David Cohen",
            role="Product Manager",
            summary=(
                "Product Manager with 5+ years of experience driving product strategy, "
                "roadmap execution, and cross-functional collaboration. Proven track record "
                "of launching successful products that drive user engagement and business "
                "growth. Passionate about understanding user needs and translating them "
                "into innovative solutions."
            ),
        ),
        contact=ContactInfo(
            location="New York, NY",
            phone="555-123-4567",
            email="david.cohen@example.com",
            linkedin="/david-cohen-pm",
        ),
        expertise=[
            "Product Strategy",
            "Roadmap Planning",
            "User Research",
            "Agile/Scrum",
            "Data Analysis",
            "Stakeholder Management",
            "A/B Testing",
            "Go-to-Market Strategy",
        ],
        tech_stack=[
            "Jira / Confluence",
            "Figma / Miro",
            "SQL / Tableau",
            "Google Analytics",
            "Mixpanel / Amplitude",
            "Productboard",
            "Notion / Asana",
        ],
        education=[
            Education(
                id="edu-1",
                degree="MBA, Product Management",
                institution="Columbia Business School",
                start_date="2016",
                end_date="2018",
            ),
            Education(
                id="edu-2",
                degree="BS, Computer Science",
                institution="New York University",
                start_date="2012",
                end_date="2016",
            ),
        ],
        experience=[
            JobExperience(
                id="exp-1",
                company="TechCorp Inc.",
                title="Senior Product Manager",
                start_date="Jan 2021",
                end_date="Present",
                bullets=[
                    "Led product strategy and roadmap for B2B SaaS platform, resulting in 40% "
                    "increase in user engagement and $2M ARR growth.",
                    "Collaborated with engineering, design, and marketing teams to launch 3 major "
                    "product features, improving customer satisfaction scores by 25%.",
                    "Conducted user research and data analysis to identify key pain points, "
                    "leading to prioritization of features that drove 30% reduction in churn.",
                    "Managed product backlog and sprint planning using Agile methodologies, "
                    "ensuring on-time delivery of 95% of roadmap items.",
                ],
            ),
            JobExperience(
                id="exp-2",
                company="StartupXYZ",
                title="Product Manager",
                start_date="Mar 2019",
                end_date="Dec 2020",
                bullets=[
                    "Owned end-to-end product development lifecycle for mobile app, from ideation "
                    "to launch, achieving 100K+ downloads in first 6 months.",
                    "Defined product requirements and user stories, working closely with UX "
                    "designers to create intuitive user experiences.",
                    "Analyzed user behavior data and conducted A/B tests to optimize conversion "
                    "funnels, increasing sign-up rates by 45%.",
                    "Coordinated go-to-market strategy with marketing and sales teams, "
                    "contributing to successful Series A fundraising round.",
                ],
            ),
            JobExperience(
                id="exp-3",
                company="Digital Solutions LLC",
                title="Associate Product Manager",
                start_date="Jun 2018",
                end_date="Feb 2019",
                bullets=[
                    "Supported product initiatives for web platform, assisting in feature "
                    "prioritization and roadmap planning.",
                    "Gathered and synthesized user feedback through surveys and interviews to "
                    "inform product decisions.",
                    "Created product documentation and user guides, improving internal knowledge "
                    "sharing and onboarding processes.",
                ],
            ),
        ],
        projects=[
            Project(
                id="proj-1",
                title="AI-Powered Recommendation Engine",
                description=(
                    "Led cross-functional team to develop and launch ML-based recommendation "
                    "system that increased user engagement by 35% and average session duration "
                    "by 20%. Worked with data science team to define model requirements and "
                    "collaborated with engineering on implementation."
                ),
            ),
            Project(
                id="proj-2",
                title="Mobile App Redesign",
                description=(
                    "Spearheaded complete redesign of mobile application based on user research "
                    "insights. Coordinated with design and engineering teams to deliver improved "
                    "UX that resulted in 50% increase in daily active users and 4.5-star app "
                    "store rating."
                ),
            ),
        ],
        show_projects=True,
        section_titles=SectionTitles(),
        metadata={"target_role": "", "target_company": "", "target_link": ""},
        scale=0.5,
    )
