"""
Reserved Vocabulary.

Namespace constants for RDF, RDFS, OWL 2, XSD, SWRL, DC and SKOS, and the
Vocabulary value: an immutable, per-category partition of the built-in
resources whose kind is fixed by the W3C specifications and must never be
inferred or re-declared.

A Vocabulary is an ordinary value passed to every transform at construction
time, so engines configured with different vocabularies can coexist.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping

from owl_declarator.storage.terms import Term


# =============================================================================
# Namespaces
# =============================================================================

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
OWL_NS = "http://www.w3.org/2002/07/owl#"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"
SWRL_NS = "http://www.w3.org/2003/11/swrl#"
SWRLB_NS = "http://www.w3.org/2003/11/swrlb#"
DC_NS = "http://purl.org/dc/elements/1.1/"
SKOS_NS = "http://www.w3.org/2004/02/skos/core#"
DECLARATOR_NS = "http://owl-declarator.dev/vocab#"


def _iris(ns: str, names: Iterable[str]) -> FrozenSet[Term]:
    return frozenset(Term.iri(ns + n) for n in names)


# RDF vocabulary
RDF_TYPE = Term.iri(RDF_NS + "type")
RDF_PROPERTY = Term.iri(RDF_NS + "Property")
RDF_FIRST = Term.iri(RDF_NS + "first")
RDF_REST = Term.iri(RDF_NS + "rest")
RDF_NIL = Term.iri(RDF_NS + "nil")

# RDFS vocabulary
RDFS_CLASS = Term.iri(RDFS_NS + "Class")
RDFS_DATATYPE = Term.iri(RDFS_NS + "Datatype")
RDFS_SUBCLASS_OF = Term.iri(RDFS_NS + "subClassOf")
RDFS_SUBPROPERTY_OF = Term.iri(RDFS_NS + "subPropertyOf")
RDFS_DOMAIN = Term.iri(RDFS_NS + "domain")
RDFS_RANGE = Term.iri(RDFS_NS + "range")
RDFS_LABEL = Term.iri(RDFS_NS + "label")

# OWL vocabulary - categories
OWL_CLASS = Term.iri(OWL_NS + "Class")
OWL_RESTRICTION = Term.iri(OWL_NS + "Restriction")
OWL_OBJECT_PROPERTY = Term.iri(OWL_NS + "ObjectProperty")
OWL_DATATYPE_PROPERTY = Term.iri(OWL_NS + "DatatypeProperty")
OWL_ANNOTATION_PROPERTY = Term.iri(OWL_NS + "AnnotationProperty")
OWL_NAMED_INDIVIDUAL = Term.iri(OWL_NS + "NamedIndividual")
OWL_THING = Term.iri(OWL_NS + "Thing")
OWL_NOTHING = Term.iri(OWL_NS + "Nothing")

# OWL vocabulary - property characteristics
OWL_FUNCTIONAL_PROPERTY = Term.iri(OWL_NS + "FunctionalProperty")
OWL_INVERSE_FUNCTIONAL_PROPERTY = Term.iri(OWL_NS + "InverseFunctionalProperty")
OWL_REFLEXIVE_PROPERTY = Term.iri(OWL_NS + "ReflexiveProperty")
OWL_IRREFLEXIVE_PROPERTY = Term.iri(OWL_NS + "IrreflexiveProperty")
OWL_SYMMETRIC_PROPERTY = Term.iri(OWL_NS + "SymmetricProperty")
OWL_ASYMMETRIC_PROPERTY = Term.iri(OWL_NS + "AsymmetricProperty")
OWL_TRANSITIVE_PROPERTY = Term.iri(OWL_NS + "TransitiveProperty")

# OWL vocabulary - axioms and expressions
OWL_ANNOTATION = Term.iri(OWL_NS + "Annotation")
OWL_AXIOM = Term.iri(OWL_NS + "Axiom")
OWL_ANNOTATED_SOURCE = Term.iri(OWL_NS + "annotatedSource")
OWL_ANNOTATED_PROPERTY = Term.iri(OWL_NS + "annotatedProperty")
OWL_ANNOTATED_TARGET = Term.iri(OWL_NS + "annotatedTarget")
OWL_ALL_DISJOINT_CLASSES = Term.iri(OWL_NS + "AllDisjointClasses")
OWL_ALL_DISJOINT_PROPERTIES = Term.iri(OWL_NS + "AllDisjointProperties")
OWL_ALL_DIFFERENT = Term.iri(OWL_NS + "AllDifferent")
OWL_NEGATIVE_PROPERTY_ASSERTION = Term.iri(OWL_NS + "NegativePropertyAssertion")
OWL_MEMBERS = Term.iri(OWL_NS + "members")
OWL_DISTINCT_MEMBERS = Term.iri(OWL_NS + "distinctMembers")
OWL_DISJOINT_WITH = Term.iri(OWL_NS + "disjointWith")
OWL_DISJOINT_UNION_OF = Term.iri(OWL_NS + "disjointUnionOf")
OWL_EQUIVALENT_CLASS = Term.iri(OWL_NS + "equivalentClass")
OWL_EQUIVALENT_PROPERTY = Term.iri(OWL_NS + "equivalentProperty")
OWL_PROPERTY_DISJOINT_WITH = Term.iri(OWL_NS + "propertyDisjointWith")
OWL_COMPLEMENT_OF = Term.iri(OWL_NS + "complementOf")
OWL_UNION_OF = Term.iri(OWL_NS + "unionOf")
OWL_INTERSECTION_OF = Term.iri(OWL_NS + "intersectionOf")
OWL_ONE_OF = Term.iri(OWL_NS + "oneOf")
OWL_HAS_KEY = Term.iri(OWL_NS + "hasKey")
OWL_ON_PROPERTY = Term.iri(OWL_NS + "onProperty")
OWL_ON_PROPERTIES = Term.iri(OWL_NS + "onProperties")
OWL_ON_CLASS = Term.iri(OWL_NS + "onClass")
OWL_ON_DATA_RANGE = Term.iri(OWL_NS + "onDataRange")
OWL_ON_DATATYPE = Term.iri(OWL_NS + "onDatatype")
OWL_WITH_RESTRICTIONS = Term.iri(OWL_NS + "withRestrictions")
OWL_DATATYPE_COMPLEMENT_OF = Term.iri(OWL_NS + "datatypeComplementOf")
OWL_ALL_VALUES_FROM = Term.iri(OWL_NS + "allValuesFrom")
OWL_SOME_VALUES_FROM = Term.iri(OWL_NS + "someValuesFrom")
OWL_HAS_VALUE = Term.iri(OWL_NS + "hasValue")
OWL_HAS_SELF = Term.iri(OWL_NS + "hasSelf")
OWL_CARDINALITY = Term.iri(OWL_NS + "cardinality")
OWL_MIN_CARDINALITY = Term.iri(OWL_NS + "minCardinality")
OWL_MAX_CARDINALITY = Term.iri(OWL_NS + "maxCardinality")
OWL_QUALIFIED_CARDINALITY = Term.iri(OWL_NS + "qualifiedCardinality")
OWL_MIN_QUALIFIED_CARDINALITY = Term.iri(OWL_NS + "minQualifiedCardinality")
OWL_MAX_QUALIFIED_CARDINALITY = Term.iri(OWL_NS + "maxQualifiedCardinality")
OWL_INVERSE_OF = Term.iri(OWL_NS + "inverseOf")
OWL_PROPERTY_CHAIN_AXIOM = Term.iri(OWL_NS + "propertyChainAxiom")
OWL_SAME_AS = Term.iri(OWL_NS + "sameAs")
OWL_DIFFERENT_FROM = Term.iri(OWL_NS + "differentFrom")
OWL_SOURCE_INDIVIDUAL = Term.iri(OWL_NS + "sourceIndividual")
OWL_ASSERTION_PROPERTY = Term.iri(OWL_NS + "assertionProperty")
OWL_TARGET_INDIVIDUAL = Term.iri(OWL_NS + "targetIndividual")
OWL_TARGET_VALUE = Term.iri(OWL_NS + "targetValue")

# XSD
XSD_STRING = Term.iri(XSD_NS + "string")
XSD_TRUE = Term.literal("true", XSD_NS + "boolean")

# SWRL
SWRL_VARIABLE = Term.iri(SWRL_NS + "Variable")
SWRL_CLASS_ATOM = Term.iri(SWRL_NS + "ClassAtom")
SWRL_DATA_RANGE_ATOM = Term.iri(SWRL_NS + "DataRangeAtom")
SWRL_INDIVIDUAL_PROPERTY_ATOM = Term.iri(SWRL_NS + "IndividualPropertyAtom")
SWRL_DATAVALUED_PROPERTY_ATOM = Term.iri(SWRL_NS + "DatavaluedPropertyAtom")
SWRL_SAME_INDIVIDUAL_ATOM = Term.iri(SWRL_NS + "SameIndividualAtom")
SWRL_DIFFERENT_INDIVIDUALS_ATOM = Term.iri(SWRL_NS + "DifferentIndividualsAtom")
SWRL_ARGUMENT1 = Term.iri(SWRL_NS + "argument1")
SWRL_ARGUMENT2 = Term.iri(SWRL_NS + "argument2")
SWRL_CLASS_PREDICATE = Term.iri(SWRL_NS + "classPredicate")
SWRL_DATA_RANGE = Term.iri(SWRL_NS + "dataRange")
SWRL_PROPERTY_PREDICATE = Term.iri(SWRL_NS + "propertyPredicate")

# The temporary category for anonymous individuals; never survives a run
ANONYMOUS_INDIVIDUAL = Term.iri(DECLARATOR_NS + "AnonymousIndividual")


# =============================================================================
# Built-in term sets
# =============================================================================

_RDF_PROPERTIES = _iris(RDF_NS, [
    "type", "subject", "predicate", "object", "first", "rest", "value",
])
_RDF_RESOURCES = _iris(RDF_NS, [
    "Property", "Statement", "List", "nil", "Alt", "Bag", "Seq",
    "XMLLiteral", "PlainLiteral", "langString", "HTML",
])
_RDFS_PROPERTIES = _iris(RDFS_NS, [
    "comment", "domain", "isDefinedBy", "label", "member", "range",
    "seeAlso", "subClassOf", "subPropertyOf",
])
_RDFS_RESOURCES = _iris(RDFS_NS, [
    "Class", "Container", "ContainerMembershipProperty", "Datatype",
    "Literal", "Resource",
])
_OWL_PROPERTIES = _iris(OWL_NS, [
    "allValuesFrom", "annotatedProperty", "annotatedSource", "annotatedTarget",
    "assertionProperty", "backwardCompatibleWith", "bottomDataProperty",
    "bottomObjectProperty", "cardinality", "complementOf", "datatypeComplementOf",
    "deprecated", "differentFrom", "disjointUnionOf", "disjointWith",
    "distinctMembers", "equivalentClass", "equivalentProperty", "hasKey",
    "hasSelf", "hasValue", "imports", "incompatibleWith", "intersectionOf",
    "inverseOf", "maxCardinality", "maxQualifiedCardinality", "members",
    "minCardinality", "minQualifiedCardinality", "onClass", "onDataRange",
    "onDatatype", "oneOf", "onProperties", "onProperty", "priorVersion",
    "propertyChainAxiom", "propertyDisjointWith", "qualifiedCardinality",
    "sameAs", "someValuesFrom", "sourceIndividual", "targetIndividual",
    "targetValue", "topDataProperty", "topObjectProperty", "unionOf",
    "versionInfo", "versionIRI", "withRestrictions",
])
_OWL_RESOURCES = _iris(OWL_NS, [
    "AllDifferent", "AllDisjointClasses", "AllDisjointProperties", "Annotation",
    "AnnotationProperty", "AsymmetricProperty", "Axiom", "Class", "DataRange",
    "DatatypeProperty", "DeprecatedClass", "DeprecatedProperty",
    "FunctionalProperty", "InverseFunctionalProperty", "IrreflexiveProperty",
    "NamedIndividual", "NegativePropertyAssertion", "Nothing", "ObjectProperty",
    "Ontology", "OntologyProperty", "ReflexiveProperty", "Restriction",
    "SymmetricProperty", "Thing", "TransitiveProperty", "real", "rational",
])
_XSD_DATATYPES = _iris(XSD_NS, [
    "string", "normalizedString", "token", "language", "Name", "NCName",
    "NMTOKEN", "NMTOKENS", "ID", "IDREF", "IDREFS", "ENTITY", "ENTITIES",
    "decimal", "integer", "double", "float", "boolean", "nonNegativeInteger",
    "nonPositiveInteger", "positiveInteger", "negativeInteger", "long", "int",
    "short", "byte", "unsignedLong", "unsignedInt", "unsignedShort",
    "unsignedByte", "hexBinary", "base64Binary", "anyURI", "QName", "NOTATION",
    "dateTime", "dateTimeStamp", "date", "time", "duration", "dayTimeDuration",
    "yearMonthDuration", "gYear", "gYearMonth", "gMonth", "gMonthDay", "gDay",
])
_XSD_FACETS = _iris(XSD_NS, [
    "length", "minLength", "maxLength", "pattern", "langRange",
    "minInclusive", "minExclusive", "maxInclusive", "maxExclusive",
    "totalDigits", "fractionDigits",
])

_OWL_DATATYPES = (
    _XSD_DATATYPES
    | _iris(RDF_NS, ["XMLLiteral", "PlainLiteral", "langString", "HTML"])
    | _iris(RDFS_NS, ["Literal"])
    | _iris(OWL_NS, ["real", "rational"])
)
_OWL_CLASSES = frozenset({OWL_THING, OWL_NOTHING})
_OWL_ANNOTATION_PROPERTIES = (
    _iris(RDFS_NS, ["label", "comment", "seeAlso", "isDefinedBy"])
    | _iris(OWL_NS, [
        "versionInfo", "backwardCompatibleWith", "priorVersion",
        "incompatibleWith", "deprecated",
    ])
)
_OWL_DATA_PROPERTIES = _iris(OWL_NS, ["topDataProperty", "bottomDataProperty"])
_OWL_OBJECT_PROPERTIES = _iris(OWL_NS, ["topObjectProperty", "bottomObjectProperty"])

_DC_PROPERTIES = _iris(DC_NS, [
    "contributor", "coverage", "creator", "date", "description", "format",
    "identifier", "language", "publisher", "relation", "rights", "source",
    "subject", "title", "type",
])

_SKOS_ANNOTATION_PROPERTIES = _iris(SKOS_NS, [
    "altLabel", "changeNote", "definition", "editorialNote", "example",
    "hiddenLabel", "historyNote", "note", "prefLabel", "scopeNote",
])
_SKOS_OBJECT_PROPERTIES = _iris(SKOS_NS, [
    "broadMatch", "broader", "broaderTransitive", "closeMatch", "exactMatch",
    "hasTopConcept", "inScheme", "mappingRelation", "member", "memberList",
    "narrowMatch", "narrower", "narrowerTransitive", "related", "relatedMatch",
    "semanticRelation", "topConceptOf",
])
_SKOS_CLASSES = _iris(SKOS_NS, ["Collection", "Concept", "ConceptScheme", "OrderedCollection"])

_SWRL_PROPERTIES = _iris(SWRL_NS, [
    "head", "body", "classPredicate", "dataRange", "propertyPredicate",
    "builtin", "arguments", "argument1", "argument2",
])
_SWRL_RESOURCES = _iris(SWRL_NS, [
    "Imp", "Variable", "AtomList", "Atom", "Builtin", "ClassAtom",
    "DataRangeAtom", "IndividualPropertyAtom", "DatavaluedPropertyAtom",
    "SameIndividualAtom", "DifferentIndividualsAtom", "BuiltinAtom",
])
_SWRLB_BUILTINS = _iris(SWRLB_NS, [
    "equal", "notEqual", "lessThan", "lessThanOrEqual", "greaterThan",
    "greaterThanOrEqual", "add", "subtract", "multiply", "divide",
    "integerDivide", "mod", "pow", "unaryPlus", "unaryMinus", "abs", "ceiling",
    "floor", "round", "roundHalfToEven", "sin", "cos", "tan", "booleanNot",
    "stringEqualIgnoreCase", "stringConcat", "substring", "stringLength",
    "normalizeSpace", "upperCase", "lowerCase", "translate", "contains",
    "containsIgnoreCase", "startsWith", "endsWith", "substringBefore",
    "substringAfter", "matches", "replace", "tokenize", "yearMonthDuration",
    "dayTimeDuration", "dateTime", "date", "time", "addYearMonthDurations",
    "subtractYearMonthDurations", "multiplyYearMonthDuration",
    "divideYearMonthDuration", "addDayTimeDurations",
    "subtractDayTimeDurations", "multiplyDayTimeDurations",
    "divideDayTimeDuration", "subtractDates", "subtractTimes",
    "addYearMonthDurationToDateTime", "addDayTimeDurationToDateTime",
    "subtractYearMonthDurationFromDateTime", "subtractDayTimeDurationFromDateTime",
    "addYearMonthDurationToDate", "addDayTimeDurationToDate",
    "subtractYearMonthDurationFromDate", "subtractDayTimeDurationFromDate",
    "addDayTimeDurationToTime", "subtractDayTimeDurationFromTime",
    "subtractDateTimesYieldingYearMonthDuration",
    "subtractDateTimesYieldingDayTimeDuration", "resolveURI", "anyURI",
    "listConcat", "listIntersection", "listSubtraction", "member", "length",
    "first", "rest", "sublist", "empty",
])


# =============================================================================
# Vocabulary value
# =============================================================================

@dataclass(frozen=True)
class Vocabulary:
    """
    Immutable partition of reserved resources by category.

    Attributes:
        classes: built-in classes (owl:Thing, owl:Nothing, ...)
        datatypes: built-in datatypes (xsd:*, rdfs:Literal, ...)
        object_properties: built-in object properties
        data_properties: built-in data properties
        annotation_properties: built-in annotation properties
        system_properties: every reserved property; assertions with such a
            predicate are never treated as property assertions
        system_resources: every reserved non-property resource
    """
    classes: FrozenSet[Term] = field(default_factory=frozenset)
    datatypes: FrozenSet[Term] = field(default_factory=frozenset)
    object_properties: FrozenSet[Term] = field(default_factory=frozenset)
    data_properties: FrozenSet[Term] = field(default_factory=frozenset)
    annotation_properties: FrozenSet[Term] = field(default_factory=frozenset)
    system_properties: FrozenSet[Term] = field(default_factory=frozenset)
    system_resources: FrozenSet[Term] = field(default_factory=frozenset)

    @property
    def builtin_properties(self) -> FrozenSet[Term]:
        """All built-in OWL properties (annotation, data and object)."""
        return self.annotation_properties | self.data_properties | self.object_properties

    @property
    def builtin_entities(self) -> FrozenSet[Term]:
        return self.classes | self.datatypes | self.builtin_properties

    @property
    def reserved(self) -> FrozenSet[Term]:
        """Every reserved term: system properties and resources."""
        return self.system_properties | self.system_resources

    @classmethod
    def union(cls, *vocabularies: "Vocabulary") -> "Vocabulary":
        """Combine vocabularies category by category."""
        def merged(name: str) -> FrozenSet[Term]:
            res: FrozenSet[Term] = frozenset()
            for v in vocabularies:
                res = res | getattr(v, name)
            return res

        return cls(
            classes=merged("classes"),
            datatypes=merged("datatypes"),
            object_properties=merged("object_properties"),
            data_properties=merged("data_properties"),
            annotation_properties=merged("annotation_properties"),
            system_properties=merged("system_properties"),
            system_resources=merged("system_resources"),
        )


OWL_VOCABULARY = Vocabulary(
    classes=_OWL_CLASSES,
    datatypes=_OWL_DATATYPES,
    object_properties=_OWL_OBJECT_PROPERTIES,
    data_properties=_OWL_DATA_PROPERTIES,
    annotation_properties=_OWL_ANNOTATION_PROPERTIES,
    system_properties=_RDF_PROPERTIES | _RDFS_PROPERTIES | _OWL_PROPERTIES | _XSD_FACETS,
    system_resources=_RDF_RESOURCES | _RDFS_RESOURCES | _OWL_RESOURCES | _XSD_DATATYPES,
)

DC_VOCABULARY = Vocabulary(
    annotation_properties=_DC_PROPERTIES,
    system_properties=_DC_PROPERTIES,
)

SKOS_VOCABULARY = Vocabulary(
    classes=_SKOS_CLASSES,
    object_properties=_SKOS_OBJECT_PROPERTIES,
    annotation_properties=_SKOS_ANNOTATION_PROPERTIES,
    system_properties=(
        _SKOS_ANNOTATION_PROPERTIES | _SKOS_OBJECT_PROPERTIES | _iris(SKOS_NS, ["notation"])
    ),
    system_resources=_SKOS_CLASSES,
)

SWRL_VOCABULARY = Vocabulary(
    system_properties=_SWRL_PROPERTIES | _SWRLB_BUILTINS,
    system_resources=_SWRL_RESOURCES,
)

DEFAULT_VOCABULARY = Vocabulary.union(
    OWL_VOCABULARY, DC_VOCABULARY, SKOS_VOCABULARY, SWRL_VOCABULARY,
)

# Named vocabularies, selectable from configuration
VOCABULARIES: Mapping[str, Vocabulary] = MappingProxyType({
    "owl": OWL_VOCABULARY,
    "dc": DC_VOCABULARY,
    "skos": SKOS_VOCABULARY,
    "swrl": SWRL_VOCABULARY,
})
