from flask import Blueprint, request, jsonify, g

from routes import request_payload
from utils import admin_required
from utils import records
from utils.validation import student_form, student_update_form

student_bp = Blueprint('students', __name__, url_prefix='/students')


@student_bp.route('', methods=['GET'])
@admin_required
def view_students():
    students = records.list_students(g.access, request.args.get('q'))
    return jsonify({'students': [s.to_dict() for s in students]})


@student_bp.route('', methods=['POST'])
@admin_required
def add_student():
    student = records.register_student(g.access, student_form(request_payload()))
    return jsonify({'student': student.to_dict(), 'parent': student.parent.to_dict()}), 201


@student_bp.route('/<int(max=2147483647):student_id>', methods=['GET'])
@admin_required
def student_detail(student_id):
    return jsonify(records.student_detail(g.access, student_id))


@student_bp.route('/<int(max=2147483647):student_id>', methods=['PATCH', 'PUT'])
@admin_required
def update_student(student_id):
    student = records.update_student(g.access, student_id, student_update_form(request_payload()))
    return jsonify({'student': student.to_dict()})


@student_bp.route('/<int(max=2147483647):student_id>', methods=['DELETE'])
@admin_required
def delete_student(student_id):
    records.delete_student(g.access, student_id)
    return '', 204
