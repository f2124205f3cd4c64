"""
Operator-authored bot texts and button labels.
"""

# Global buttons
BTN_BOOK_EXCURSION = "📅 Записаться на экскурсию"
BTN_BOOK_EVENT = "🎄 Праздничные события"
BTN_EXCURSIONS = "🐄 Экскурсии"
BTN_SCHEDULE = "📅 Расписание"
BTN_PRODUCTS = "🛒 Продукция"
BTN_DIRECTIONS = "📍 Как добраться"
BTN_RESET = "🔄 Сбросить заявку"
BTN_MAIN_MENU = "🏡 Главное меню"

START_COMMAND = "/start"
DEEP_LINK_EVENT_PREFIX = "event-"

# Operator commands
CMD_EVENTS = "/events"
CMD_ROSTER = "/roster"

# Party size buttons of the excursion flow, mapped to the stored value
EXCURSION_PEOPLE_CHOICES = {
    "1": "1",
    "2": "2",
    "3": "3",
    "4": "4",
    "5": "5",
    "6": "6",
    "6–10": "6-10",
    "более 11": "11+",
}

EVENT_PEOPLE_BUTTONS = ("1", "2", "3", "4", "5", "6")
EVENT_PEOPLE_MAX = 10

WELCOME = "Добро пожаловать на Ферму Голубой Коровы!\n\nВыберите действие:"
RESET_DONE = "Заявка сброшена. Можете начать заново."
FALLBACK = "Спасибо! Мы свяжемся с вами."
SOMETHING_WENT_WRONG = "Что-то пошло не так. Попробуйте, пожалуйста, ещё раз чуть позже."

INFO_EXCURSIONS = (
    "Ферма Голубой Коровы приглашает вас на экскурсии:\n\n"
    "1) Обзорная экскурсия — 1 час\n"
    "— знакомство с коровами, козами, ламами\n"
    "— кормление животных\n"
    "— прогулка по территории\n\n"
    "2) Гастро-тур — 1.5 часа\n"
    "— дегустация сыра и свежего молока\n"
    "— мини-лекция о сыроварне\n\n"
    "3) Семейная экскурсия — 1 час\n"
    "— формат для детей\n"
    "— дружелюбные животные\n"
)

INFO_SCHEDULE = (
    "Экскурсии каждый день по предварительной записи с 10:00 до 18:00.\n"
    "Магазин работает с 11:00 до 17:00.\n"
    "Бронируйте заранее."
)

INFO_DIRECTIONS = (
    "Адрес:\nПсковская область, Печорский район,\nдеревня Подлесье, Центральная 10.\n\n"
    "В навигатор: Ферма Голубой Коровы\n"
    "От Пскова → 55 минут\nОт Изборска → 20 минут\nОт Печор → 15 минут"
)

INFO_PRODUCTS = (
    "Наша продукция:\n"
    "— выдержанные сыры\n— сыры\n— сырники\n— масло сливочное\n— говядина и телятина\n\n"
    "Купить можно в фермерском магазине."
)

INFO_BLOCKS = {
    BTN_EXCURSIONS: INFO_EXCURSIONS,
    BTN_SCHEDULE: INFO_SCHEDULE,
    BTN_DIRECTIONS: INFO_DIRECTIONS,
    BTN_PRODUCTS: INFO_PRODUCTS,
}

# Flow prompts
ASK_NAME = "Как вас зовут?\n\nВы можете в любой момент сбросить заявку или вернуться в главное меню."
ASK_NAME_AGAIN = "Пожалуйста, напишите, как вас зовут."
ASK_DATE = "На какую дату хотите записаться?"
ASK_DATE_AGAIN = "Пожалуйста, укажите дату."
ASK_TIME = "Во сколько? (например, 11:30 / 15:30 (летом))"
ASK_TIME_AGAIN = "Пожалуйста, укажите время."
ASK_PEOPLE = "Сколько гостей будет?"
ASK_PEOPLE_BUTTONS = "Пожалуйста, выберите количество гостей кнопкой ниже."
ASK_EVENT_PEOPLE_AGAIN = f"Пожалуйста, укажите число гостей от 1 до {EVENT_PEOPLE_MAX}."
ASK_CONTACT = "Ваш телефон или Telegram?"
CONTACT_INVALID = (
    "Пожалуйста, укажите корректный контакт.\n"
    "Телефон (например: +7 999 123-45-67) или Telegram-ник (@username)."
)
ASK_EVENT = "На какое событие хотите записаться?"
ASK_EVENT_BUTTONS = "Пожалуйста, выберите событие кнопкой ниже."
EVENT_FULLY_BOOKED = "К сожалению, на «{title}» ({date}) все места уже заняты."
EVENT_NOT_FOUND = "Такое событие не найдено. Выберите событие в меню."
EVENT_CHOSEN = "Событие: {title}, {date}."
REQUEST_SENT = "Спасибо! Ваша заявка отправлена. Мы свяжемся с вами для подтверждения."

# Operator-facing texts
ADMIN_NEW_EXCURSION = (
    "Новая заявка на экскурсию:\n\n"
    "ID: {id}\n"
    "Имя: {name}\n"
    "Дата: {date}\n"
    "Время: {time}\n"
    "Гостей: {people}\n"
    "Контакт: {contact}"
)
ADMIN_NEW_EVENT = (
    "Новая заявка на событие:\n\n"
    "ID: {id}\n"
    "Событие: {event_title}\n"
    "Дата: {event_date}\n"
    "Имя: {name}\n"
    "Гостей: {people}\n"
    "Контакт: {contact}"
)
BTN_CONFIRM = "✅ Подтвердить"
BTN_CANCEL = "❌ Отклонить"

ACTION_CONFIRM = "confirm"
ACTION_CANCEL = "cancel"
ACTION_ROSTER = "roster"

ACK_FORBIDDEN = "Недостаточно прав."
ACK_UNKNOWN_ACTION = "Неизвестное действие."
ACK_NOT_FOUND = "Заявка не найдена."
ACK_EVENT_NOT_FOUND = "Событие не найдено."
ACK_ALREADY_CONFIRMED = "Заявка уже подтверждена."
ACK_ALREADY_CANCELLED = "Заявка уже отклонена."
ACK_INVALID_PEOPLE = "В заявке некорректное количество гостей."
ACK_NO_SEATS = "Недостаточно мест: свободно {free}."
ACK_CONFIRMED = "Заявка подтверждена."
ACK_CANCELLED = "Заявка отклонена."
ACK_ROSTER = "Список отправлен."

ADMIN_DECISION_CONFIRMED = "Заявка {id} подтверждена."
ADMIN_DECISION_CANCELLED = "Заявка {id} отклонена."
ADMIN_STATUS_CONFIRMED = "Статус: ✅ подтверждена"
ADMIN_STATUS_CANCELLED = "Статус: ❌ отклонена"

USER_CONFIRMED_EXCURSION = "Ваша заявка {id} подтверждена.\n\nДата: {date}\nВремя: {time}\nЖдём вас на ферме!"
USER_CONFIRMED_EVENT = "Ваша заявка {id} подтверждена.\n\nСобытие: {event_title}\nДата: {event_date}\nГостей: {people}\nЖдём вас на ферме!"
USER_CANCELLED = "Ваша заявка {id} отклонена. Если это ошибка — свяжитесь с нами."

SUMMARY_HEADER = "Праздничные события:"
SUMMARY_LINE = "{title} ({date}): {booked}/{capacity} — {state}"
SUMMARY_OPEN = "запись открыта"
SUMMARY_CLOSED = "мест нет"
ROSTER_HEADER = "Заявки на «{title}» ({date}), занято {booked}/{capacity}:"
ROSTER_LINE = "{id} · {status} · {name} · {people} чел."
ROSTER_EMPTY = "Заявок пока нет."
ROSTER_USAGE = "Использование: /roster <id события>"

STATUS_LABELS = {
    "new": "новая",
    "confirmed": "подтверждена",
    "cancelled": "отклонена",
}
