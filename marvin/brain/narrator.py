import random
from datetime import datetime

from marvin.bus.messages import EmotionState
from marvin.utils.camera import CameraErrorKind

WELCOME = ("Hello! I'm Marvin, your AI assistant. You can talk to me using voice commands "
           "or type your questions. Try saying 'hello' or 'what can you do?'")
LISTENING = "Marvin is listening..."

FALLBACK = "I'm not sure I understand. Could you please rephrase your command?"

GREETING = "Hello! How can I assist you today?"
WHO_ARE_YOU = ("I am Marvin, your smart AI assistant with object detection, emotion recognition, "
               "and voice capabilities. I was designed to help you with tasks, answer your questions, "
               "and make your day easier!")
CREATOR = "I was programmed by Adnan."
THANKS = "It was my pleasure!"
HOW_ARE_YOU = "I'm doing great, What about you?"
GOODBYE = "Goodbye! Shutting down, Refresh the page if you wanna start interacting again"
ACKNOWLEDGE = "I'm glad to hear that, So what can I assist you with today?"
ROOM_TEMPERATURE = "The room temperature ranges from: 20–22 °C"

# camera / vision
CAMERA_ON = "Camera activated! Object detection is now running."
CAMERA_ALREADY_ON = "Webcam is already active."
CAMERA_OFF = "Webcam has been stopped, and vision has been deactivated."
ALL_DETECTION_OFF = "All camera detection has been stopped."
NOTHING_SEEN = "I'm not detecting any objects right now."

CAMERA_ERROR_PREFIX = "Sorry, I couldn't access the camera. "
CAMERA_ERRORS = {
    CameraErrorKind.PERMISSION_DENIED: "Please allow camera permissions and try again.",
    CameraErrorKind.NOT_FOUND: "No camera found. Please check if your camera is connected.",
    CameraErrorKind.NOT_SUPPORTED: "Your device doesn't support camera access.",
    CameraErrorKind.OTHER: "Please make sure your camera is connected and you've granted permission.",
}

# emotion
EMOTION_STARTING_CAMERA = "Starting camera for emotion detection..."
EMOTION_ON = "Emotion detection activated! I'm now analyzing your facial expressions through the camera."
EMOTION_ALREADY_ON = "Emotion detection is already active."
EMOTION_OFF = "Emotion detection has been stopped."
EMOTION_INACTIVE = ("Emotion detection is not active. Say 'start emotion detection' "
                    "to begin analyzing your emotions.")
EMOTION_NO_FACE = "I can't see your face right now. Please look at the camera and ask me again."

EMOTION_REPORTS = {
    "happy": "You appear to be feeling happy! With {c}% confidence, I can see positive emotions. That's wonderful!",
    "sad": "I sense you might be feeling sad ({c}% confidence). Is everything okay? Would you like to talk about it?",
    "angry": "I'm detecting some anger ({c}% confidence). Would you like to discuss what's bothering you?",
    "surprised": "You look surprised! ({c}% confidence) Did something unexpected happen?",
    "fearful": "I sense some fear in your expression ({c}% confidence). Everything will be alright.",
    "disgusted": "You appear disgusted ({c}% confidence). Is there something unpleasant?",
    "neutral": "You seem to be in a neutral, balanced state of mind ({c}% confidence).",
    "focused": "You appear very focused and concentrated ({c}% confidence). Great for productivity!",
    "calm": "You seem calm and relaxed ({c}% confidence). That's a peaceful state to be in.",
}

# web / browser
SEARCH_EMPTY = "Please specify what you want me to search for."
SEARCH_DONE = "Opening Google search results now."
YOUTUBE_EMPTY = "Please specify what you want me to play on YouTube."
YOUTUBE_DONE = "Enjoy your video! I'll be right here when you return."
INTRODUCE_EMPTY = "Please provide a name to introduce myself to."
ROUTE_HELP = "Please say: easiest route from place to place"

# remote services
TRANSLATE_HELP = "Please say something like 'Translate good morning to Hindi'"
TRANSLATE_FAILED = "Sorry, I couldn't complete the translation."
ENCYCLOPEDIA_MISS = "Sorry, I couldn't find an answer for that."
NEWS_EMPTY = "Sorry, I couldn't find any news at the moment."
NEWS_FAILED = "Sorry, I couldn't fetch the news right now. Please try again later."

# pro mode
PRO_MODE_ON = ("PRO MODE ACTIVATED! All systems enhanced. Advanced AI capabilities online. "
               "Animations optimized for maximum performance. Ready for advanced queries.")
PRO_MODE_OFF = "Pro Mode deactivated. Returning to standard operational parameters."
PRO_MODE_REQUIRED = "Pro Mode is not active. Enable PRO MODE for advanced AI capabilities."

JOKES = (
    "Why don't skeletons fight each other? They don't have the guts.",
    "Why did the scarecrow win an award? Because he was outstanding in his field!",
    "I told my wife she was drawing her eyebrows too high. She looked surprised.",
    "I used to play piano by ear, but now I use my hands.",
    "What do you get when you cross a snowman and a vampire? Frostbite.",
    "Why don't oysters share their pearls? Because they're shellfish.",
    "I told my computer I needed a break, and now it won't stop sending me Kit-Kats.",
    "What did the grape do when it got stepped on? Nothing, but it let out a little wine.",
    "Why don't some couples go to the gym? Because some relationships don't work out.",
    "Why did the coffee file a police report? It got mugged.",
    "I used to be a baker, but I couldn't make enough dough.",
    "I told my friend 10 jokes to make him laugh. Sadly, no pun in 10 did.",
    "Why don't eggs tell jokes? They'd crack each other up.",
    "I'm reading a book on anti-gravity. It's impossible to put down.",
    "I wanted to become a professional skateboarder, but I couldn't handle the grind.",
    "How does a penguin build its house? Igloos it together!",
    "Why did the bicycle fall over? Because it was two-tired.",
    "Why can't you trust an atom? Because they make up everything!",
    "Did you hear about the mathematician who's afraid of negative numbers? He'll stop at nothing to avoid them.",
    "What did one ocean say to the other ocean? Nothing, they just waved.",
)


def joke(rng=random) -> str:
    return rng.choice(JOKES)


def camera_error(kind: CameraErrorKind) -> str:
    return CAMERA_ERROR_PREFIX + CAMERA_ERRORS.get(kind, CAMERA_ERRORS[CameraErrorKind.OTHER])


def emotion_report(state: EmotionState) -> str:
    if not state.face_detected or state.label is None:
        return EMOTION_NO_FACE
    label = state.label.value
    template = EMOTION_REPORTS.get(label)
    if template is None:
        return f"I detect you're feeling {label} with {state.confidence}% confidence."
    return template.format(c=state.confidence)


def time_and_date(now: datetime) -> str:
    hour = now.hour % 12 or 12
    clock = f"{hour}:{now:%M:%S} {'AM' if now.hour < 12 else 'PM'}"
    return f"The current time is {clock} and the date is {now.month}/{now.day}/{now.year}."


def weather(location: str, report) -> str:
    return (f"In {location}, it's currently {report.condition.lower()} with a temperature of "
            f"{report.temperature} and {report.wind} wind.")


def weather_failed(location: str) -> str:
    return f"I couldn't get the weather for {location}. Please try again later."


def translation(language: str, text: str, translated: str) -> str:
    return f'In {language}, "{text}" is "{translated}"'


def unsupported_language(language: str) -> str:
    return f"Sorry, I don't support translation to {language} yet."


def headline(title: str) -> str:
    return f"Here is the latest news: {title}"


def search_preparing(query: str) -> str:
    return f'Searching Google for "{query}".'


def youtube_preparing(query: str) -> str:
    return f'Searching and playing "{query}" directly on YouTube.'


def tickets_opened(mode: str) -> str:
    return f"Opened {mode} ticket booking website..."


def introduce(name: str) -> str:
    return f"Hello {name}, I am Marvin, your virtual agent. It was a pleasure meeting you!"


def route(origin: str, destination: str) -> str:
    return f"Opening the route from {origin} to {destination} in Google Maps..."


def llm_unavailable(detail: str) -> str:
    return f"SYSTEM ERROR: Advanced AI temporarily unavailable. {detail}"
