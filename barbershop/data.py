# barbershop/data.py

SERVICES = [
    "Men's Haircut",
    "Women's Haircut",
    "Beard Trim",
    "Beard Shaping",
    "Hot Towel Shave",
    "Hair Coloring",
    "Highlights",
    "Hair Treatment",
]

# Hourly slots, 06:00 through 20:00
TIME_SLOTS = [f"{hour:02d}:00" for hour in range(6, 21)]

STATUSES = ("pending", "confirmed", "completed", "canceled")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500
COMMENT_MAX_LENGTH = 500

ADMIN_ROLE = "admin"

shop_settings = {
    "name": "EliteCuts",
    "location": {
        "city": "Damascus",
        "country": "Syria",
        "address": "Syria Damascus",
        "phone": "+96312345678",
        "email": "EliteCuts@gmail.com",
    },
    "hours": {
        "weekdays": "Mon - Fri: 5 AM - 11 PM",
        "saturday": "Saturday: 6 AM - 9 PM",
        "sunday": "Sun: 7 AM - 8 PM",
    },
    "prices": {
        "Men's Haircut": "$25",
        "Women's Haircut": "$45",
        "Beard Service": "$15",
        "Hair Coloring": "$60+",
        "Hair Treatment": "$35",
        "Special Occasions": "$50+",
    },
}
