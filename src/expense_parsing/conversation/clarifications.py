"""Localised clarification and error messages shown to the user."""
from __future__ import annotations

from ..models.expense import FallbackReason

FALLBACK_LOCALE = "en-US"

AMBIGUOUS_INTENT_PROMPTS: dict[str, str] = {
    "en-US": "I'm not sure what you'd like to do. Could you clarify if you want to add an expense, check balances, or manage your group?",
    "es": "No estoy seguro de lo que quieres hacer. ¿Podrías aclarar si quieres agregar un gasto, revisar saldos o gestionar tu grupo?",
    "fr-FR": "Je ne suis pas sûr de ce que vous voulez faire. Pourriez-vous préciser si vous voulez ajouter une dépense, vérifier les soldes ou gérer votre groupe?",
    "de-DE": "Ich bin nicht sicher, was Sie tun möchten. Könnten Sie klären, ob Sie eine Ausgabe hinzufügen, Salden prüfen oder Ihre Gruppe verwalten möchten?",
    "zh-CN": "我不确定您想做什么。您能澄清一下是想添加支出、查看余额还是管理群组吗？",
    "zh-TW": "我不確定您想做什麼。您能澄清一下是想新增支出、查看餘額還是管理群組嗎？",
    "pl-PL": "Nie jestem pewien, co chcesz zrobić. Czy mógłbyś wyjaśnić, czy chcesz dodać wydatek, sprawdzić salda, czy zarządzać grupą?",
    "ru-RU": "Я не уверен, что вы хотите сделать. Не могли бы вы уточнить, хотите ли вы добавить расход, проверить балансы или управлять группой?",
    "it-IT": "Non sono sicuro di cosa vuoi fare. Potresti chiarire se vuoi aggiungere una spesa, controllare i saldi o gestire il tuo gruppo?",
    "ua-UA": "Я не впевнений, що ви хочете зробити. Чи могли б ви уточнити, чи хочете ви додати витрату, перевірити баланси або керувати групою?",
    "ro": "Nu sunt sigur ce doriți să faceți. Ați putea clarifica dacă doriți să adăugați o cheltuială, să verificați soldurile sau să gestionați grupul?",
    "tr-TR": "Ne yapmak istediğinizden emin değilim. Bir gider eklemek, bakiyeleri kontrol etmek veya grubunuzu yönetmek isteyip istemediğinizi açıklayabilir misiniz?",
    "pt-BR": "Não tenho certeza do que você quer fazer. Você poderia esclarecer se quer adicionar uma despesa, verificar saldos ou gerenciar seu grupo?",
    "nl-NL": "Ik weet niet zeker wat u wilt doen. Kunt u verduidelijken of u een uitgave wilt toevoegen, saldi wilt controleren of uw groep wilt beheren?",
    "fi": "En ole varma, mitä haluat tehdä. Voisitko selventää, haluatko lisätä kulun, tarkistaa saldoja vai hallita ryhmääsi?",
}

# Keyed by fallback reason; None is the generic message.
ERROR_MESSAGES: dict[str, dict[FallbackReason | None, str]] = {
    "en-US": {
        FallbackReason.TIMEOUT: "The AI service is taking too long to respond. Please try again or use the manual entry options.",
        FallbackReason.API_UNAVAILABLE: "The AI service is currently unavailable. Please use the manual entry options or try again later.",
        FallbackReason.RATE_LIMIT: "Too many requests. Please wait a moment and try again, or use the manual entry options.",
        FallbackReason.PARSE_ERROR: "I had trouble processing your request. Please rephrase it or use the manual entry options.",
        None: "Something went wrong. Please use the manual entry options.",
    },
    "es": {
        FallbackReason.TIMEOUT: "El servicio de IA está tardando mucho en responder. Inténtalo de nuevo o usa las opciones manuales.",
        FallbackReason.API_UNAVAILABLE: "El servicio de IA no está disponible. Usa las opciones manuales o inténtalo más tarde.",
        FallbackReason.RATE_LIMIT: "Demasiadas solicitudes. Espera un momento e inténtalo de nuevo, o usa las opciones manuales.",
        FallbackReason.PARSE_ERROR: "Tuve problemas procesando tu solicitud. Por favor, reformúlala o usa las opciones manuales.",
        None: "Algo salió mal. Por favor, usa las opciones manuales.",
    },
    "fr-FR": {
        FallbackReason.TIMEOUT: "Le service IA prend trop de temps à répondre. Veuillez réessayer ou utiliser les options manuelles.",
        FallbackReason.API_UNAVAILABLE: "Le service IA n'est pas disponible. Veuillez utiliser les options manuelles ou réessayer plus tard.",
        FallbackReason.RATE_LIMIT: "Trop de requêtes. Veuillez attendre un moment et réessayer, ou utiliser les options manuelles.",
        FallbackReason.PARSE_ERROR: "J'ai eu du mal à traiter votre demande. Veuillez la reformuler ou utiliser les options manuelles.",
        None: "Quelque chose s'est mal passé. Veuillez utiliser les options manuelles.",
    },
}

MISSING_AMOUNT_MESSAGES: dict[str, str] = {
    "en-US": "Could not extract a valid amount. Please specify how much was spent.",
    "es": "No se pudo extraer un importe válido. Indica cuánto se gastó.",
    "fr-FR": "Impossible d'extraire un montant valide. Veuillez préciser combien a été dépensé.",
    "de-DE": "Es konnte kein gültiger Betrag erkannt werden. Bitte geben Sie an, wie viel ausgegeben wurde.",
}

LOW_CONFIDENCE_MESSAGES: dict[str, str] = {
    "en-US": "I need a few more details. What was this expense for, and who shared it?",
    "es": "Necesito algunos detalles más. ¿Para qué fue este gasto y quién lo compartió?",
    "fr-FR": "J'ai besoin de quelques détails supplémentaires. À quoi correspondait cette dépense et qui l'a partagée?",
    "de-DE": "Ich brauche noch ein paar Details. Wofür war diese Ausgabe und wer hat sie geteilt?",
}


def ambiguous_intent_prompt(locale: str) -> str:
    return AMBIGUOUS_INTENT_PROMPTS.get(locale, AMBIGUOUS_INTENT_PROMPTS[FALLBACK_LOCALE])


def error_message(reason: FallbackReason | None, locale: str) -> str:
    """Message for a failed model call; unknown reasons get the generic text."""
    messages = ERROR_MESSAGES.get(locale, ERROR_MESSAGES[FALLBACK_LOCALE])
    return messages.get(reason, messages[None])


def missing_amount_message(locale: str) -> str:
    return MISSING_AMOUNT_MESSAGES.get(locale, MISSING_AMOUNT_MESSAGES[FALLBACK_LOCALE])


def low_confidence_message(locale: str) -> str:
    return LOW_CONFIDENCE_MESSAGES.get(locale, LOW_CONFIDENCE_MESSAGES[FALLBACK_LOCALE])
