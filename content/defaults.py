# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""Seed documents written the first time a collection is read."""

DEFAULT_ADMIN_EMAILS = [
    "mukul.meena@iitgn.ac.in",
    "technical.secretary@iitgn.ac.in",
]

DEFAULT_THEME_COLOR = "#06b6d4"

DEFAULT_CLUBS = {
    "metis": {
        "id": "metis",
        "name": "Metis, Development Club",
        "description": (
            "Focuses on software development and coding, where members work on "
            "real-world projects, contribute to open-source, and hone their "
            "programming skills."
        ),
        "longDescription": (
            "Metis, the Development Club, is dedicated to fostering software "
            "development skills among students. We focus on real-world project "
            "development, open-source contributions, and modern programming "
            "practices."
        ),
        "type": "club",
        "category": "Software Development",
        "members": "60+",
        "established": "2018",
        "email": "metis@iitgn.ac.in",
        "achievements": [
            "Contributed to 50+ open-source projects",
            "Developed campus management applications",
        ],
        "projects": [
            "Campus Event Management System",
            "Student Collaboration Platform",
        ],
        "team": [
            {"name": "Aryan Sharma", "role": "Club President", "email": "aryan@iitgn.ac.in"},
            {"name": "Priya Singh", "role": "Technical Lead", "email": "priya.singh@iitgn.ac.in"},
        ],
        "createdAt": "2023-01-01T00:00:00Z",
        "updatedAt": "2023-01-01T00:00:00Z",
    },
    "grasp": {
        "id": "grasp",
        "name": "GRASP, CP Club",
        "description": (
            "Dedicated to competitive programming, where members regularly "
            "participate in coding contests and work on improving their "
            "problem-solving abilities."
        ),
        "longDescription": (
            "GRASP, the Competitive Programming Club, focuses on developing "
            "algorithmic thinking and problem-solving skills."
        ),
        "type": "club",
        "category": "Competitive Programming",
        "members": "80+",
        "established": "2017",
        "email": "grasp@iitgn.ac.in",
        "achievements": [
            "Multiple ICPC regional qualifications",
            "Organized inter-college programming contests",
        ],
        "projects": [
            "Online Judge Platform Development",
            "Algorithm Visualization Tools",
        ],
        "team": [
            {"name": "Harsh Agarwal", "role": "Club President", "email": "harsh.agarwal@iitgn.ac.in"},
            {"name": "Divya Singh", "role": "Training Coordinator", "email": "divya.singh@iitgn.ac.in"},
        ],
        "createdAt": "2023-01-01T00:00:00Z",
        "updatedAt": "2023-01-01T00:00:00Z",
    },
}

DEFAULT_MAGAZINES = {
    "torque-2023": {
        "id": "torque-2023",
        "year": "2023",
        "title": "Innovation Unleashed",
        "description": "Exploring the frontiers of AI, robotics, and sustainable technology",
        "pages": 120,
        "articles": 25,
        "featured": "AI in Healthcare",
        "filePath": "/torque/magazines/torque-2023.pdf",
        "fileName": "torque-2023.pdf",
        "fileSize": 15728640,
        "coverPhoto": "/torque/covers/torque-2023-cover.jpg",
        "coverPhotoFileName": "torque-2023-cover.jpg",
        "isLatest": True,
        "createdAt": "2023-12-01T00:00:00Z",
        "updatedAt": "2023-12-01T00:00:00Z",
    },
    "torque-2022": {
        "id": "torque-2022",
        "year": "2022",
        "title": "Digital Transformation",
        "description": "How technology is reshaping industries and society",
        "pages": 108,
        "articles": 22,
        "featured": "Blockchain Revolution",
        "filePath": "/torque/magazines/torque-2022.pdf",
        "fileName": "torque-2022.pdf",
        "fileSize": 14680064,
        "isLatest": False,
        "createdAt": "2022-12-01T00:00:00Z",
        "updatedAt": "2022-12-01T00:00:00Z",
    },
    "torque-2021": {
        "id": "torque-2021",
        "year": "2021",
        "title": "Future Forward",
        "description": "Student innovations and research breakthroughs",
        "pages": 95,
        "articles": 20,
        "featured": "Quantum Computing",
        "filePath": "/torque/magazines/torque-2021.pdf",
        "fileName": "torque-2021.pdf",
        "fileSize": 12582912,
        "isLatest": False,
        "createdAt": "2021-12-01T00:00:00Z",
        "updatedAt": "2021-12-01T00:00:00Z",
    },
}


def default_contact_info(now: str) -> dict:
    return {
        "address": {
            "street": "323, Acad Block 4, IIT Gandhinagar",
            "city": "Palaj, Gandhinagar",
            "state": "Gujarat",
            "postalCode": "382355",
            "country": "India",
        },
        "phone": "+91-79-2395-2001",
        "email": "technical.secretary@iitgn.ac.in",
        "socialMedia": {
            "instagram": "https://www.instagram.com/tech_iitgn",
            "youtube": "https://www.youtube.com/@tech_iitgn",
            "linkedin": "https://www.linkedin.com/school/tech-council-iitgn/",
            "facebook": "https://www.facebook.com/tech.iitgn",
        },
        "lastModified": now,
        "modifiedBy": "System",
    }


def default_site_settings(now: str) -> dict:
    return {
        "hackathonsVisible": True,
        "lastModified": now,
        "modifiedBy": "system",
        "createdAt": now,
        "updatedAt": now,
    }


def default_admin_emails(now: str) -> dict:
    return {
        "emails": list(DEFAULT_ADMIN_EMAILS),
        "lastModified": now,
        "modifiedBy": "system",
        "createdAt": now,
        "updatedAt": now,
    }


def default_theme_settings(now: str) -> dict:
    return {"color": DEFAULT_THEME_COLOR, "lastUpdated": now}
