from typing import NamedTuple, Tuple


class TransformationRule(NamedTuple):
    pattern: str
    replacement: str = ""
    aggressive: bool = False


fillers: Tuple[TransformationRule, ...] = tuple(TransformationRule(f) for f in (
    "really", "very", "basically", "actually", "certainly", "quite",
    "somewhat", "rather", "pretty", "just", "simply", "essentially",
    "i think", "in my humble opinion", "as a matter of fact", "for all intents and purposes",
    "kind of", "sort of", "like", "you know", "literally", "totally", "absolutely",
    "obviously", "at the end of the day", "if you ask me", "i guess", "i feel like",
    "in a way", "to be honest", "honestly", "in my opinion", "more or less",
    "by the way", "so yeah", "i mean", "as such", "it seems like", "actually speaking",
    "basically speaking", "for what it's worth", "as far as i know",
))

verbose_replacements: Tuple[TransformationRule, ...] = (
    TransformationRule("in order to", "to"),
    TransformationRule("due to the fact that", "because"),
    TransformationRule("at this point in time", "now"),
    TransformationRule("as soon as possible", "soon"),
    TransformationRule("with regard to", "about"),
    TransformationRule("in the near future", "soon"),
    TransformationRule("it is important to note", ""),
    TransformationRule("prior to", "before"),
    TransformationRule("subsequent to", "after"),
    TransformationRule("in the event that", "if"),
    TransformationRule("at the end of the day", ""),
    TransformationRule("for all intents and purposes", ""),
    TransformationRule("it seems like", ""),
    TransformationRule("as far as i know", ""),
)

typos: Tuple[TransformationRule, ...] = (
    TransformationRule("teh", "the"),
    TransformationRule("recieve", "receive"),
    TransformationRule("definately", "definitely"),
    TransformationRule("proplery", "properly"),
    TransformationRule("neccessary", "necessary"),
    TransformationRule("lve", "love"),
    TransformationRule("dount", "doubt"),
    TransformationRule("insted", "instead"),
    TransformationRule("acheive", "achieve"),
    TransformationRule("engeineering", "engineering"),
    TransformationRule("stduy", "study"),
    TransformationRule("inn", "in", aggressive=True),
    TransformationRule("ekdam", ""),
    TransformationRule("nee", "need", aggressive=True),
    TransformationRule("youu", "you"),
    TransformationRule("u", "you", aggressive=True),
    TransformationRule("alot", "a lot"),
    TransformationRule("becuase", "because"),
    TransformationRule("thier", "their"),
    TransformationRule("wierd", "weird"),
    TransformationRule("woudl", "would"),
    TransformationRule("shoudl", "should"),
)

remote_fillers = ("really", "very", "just", "basically", "actually")

response_preambles = ("Edited text:", "Fixed text:", "Result:")
