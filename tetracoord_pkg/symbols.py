"""Operator symbols, keywords and reserved identifiers of the expression language."""

# Operators
ADD_OP = "+"
SUB_OP = "-"
MULT_OP = "*"
DIV_OP = "/"
EXP_OP = "**"
ABS_GROUP_OP = "||"
EQ_OP = "=="
NEQ_OP = "!="
EQ_STRICT_OP = "==="
NEQ_STRICT_OP = "!=="
ASSIGN_OP = "="
COLLECTION_DELIM = ","
GROUP_OP = "()"
CALL_OP = "()"
ACCESS_OP = "."
VEC_OP = "[]"
RADIX_OP = "@"
IRRATIONAL_OP = "~"

IRRATIONAL_SUFFIXES = ("i", "...")

# Value tags
VEC_CCOORD_ID = "cc"
VEC_TCOORD_ID = "tc"
TCOORD_V = "v"
CCOORD_X = "x"
CCOORD_Y = "y"
EXPR_CALC_TYPE = "exprcalc"
SCALAR_TYPE = "powerscalar"
COLLECTION_TYPE = "collection"

# Variable namespace
VAR_CTX_ID = "var"
VAR_ANS_ID = "$ans"

# Named constants
COSPI6_ID = "cospi6"
SINPI6_ID = "sinpi6"
TRUE_ID = "true"
FALSE_ID = "false"
